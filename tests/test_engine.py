# tests/test_engine.py
"""Tests for the two-tier classification entry point."""

import pytest

from feed_curator.classification import engine
from feed_curator.classification.engine import (
    CLASSIFICATION_ERROR_REASON,
    NO_INTERESTS_REASON,
    classify,
    semantic_classify,
)
from feed_curator.classification.fallback import INVALID_INPUT_REASON
from feed_curator.interest_cache import InterestCache, InterestSnapshot

from tests.fakes import FakeEmbeddingProvider


async def build_snapshot(provider, interests):
    cache = InterestCache()
    await cache.on_provider_ready(provider)
    await cache.recompute(interests)
    return cache.snapshot()


# ---------------------------------------------------------------------------
# Tier 1
# ---------------------------------------------------------------------------


class TestSemanticTier:
    @pytest.mark.asyncio
    async def test_similar_text_is_kept(self, provider):
        snapshot = await build_snapshot(provider, ["ai", "music"])
        result = await classify("New ai chip announced", snapshot, [], 0.35, provider)
        assert result.is_uninteresting is False
        assert result.reason.startswith("sim=")
        assert result.similarity == pytest.approx(0.5)

    @pytest.mark.asyncio
    async def test_unrelated_text_is_hidden(self, provider):
        snapshot = await build_snapshot(provider, ["ai", "music"])
        result = await classify("Cooking pasta tonight", snapshot, [], 0.35, provider)
        assert result.is_uninteresting is True
        assert result.reason == "sim=0.00"

    @pytest.mark.asyncio
    async def test_threshold_is_respected(self, provider):
        snapshot = await build_snapshot(provider, ["ai"])
        result = await classify("New ai chip announced", snapshot, [], 0.9, provider)
        assert result.is_uninteresting is True

    @pytest.mark.asyncio
    async def test_spam_keyword_checked_before_embedding(self, provider):
        snapshot = await build_snapshot(provider, ["ai"])
        calls_before = len(provider.calls)
        result = await classify("Free crypto for ai fans", snapshot, ["free crypto"], 0.35, provider)
        assert result.is_uninteresting is True
        assert result.reason == "Spam keyword: free crypto"
        assert len(provider.calls) == calls_before

    @pytest.mark.asyncio
    async def test_no_interests_keeps(self, provider):
        result = await classify("Anything at all", InterestSnapshot(), [], 0.35, provider)
        assert result.is_uninteresting is False
        assert result.reason == NO_INTERESTS_REASON

    @pytest.mark.asyncio
    async def test_semantic_classify_propagates_provider_errors(self):
        provider = FakeEmbeddingProvider(fail_on="boom")
        snapshot = await build_snapshot(provider, ["ai"])
        with pytest.raises(RuntimeError):
            await semantic_classify("boom goes the ai", snapshot, [], 0.35, provider)


# ---------------------------------------------------------------------------
# Tier selection and fallback
# ---------------------------------------------------------------------------


class TestTierSelection:
    @pytest.mark.asyncio
    async def test_no_provider_uses_fallback(self):
        result = await classify("I love music", ["music"])
        assert result.reason == "Direct match: music"

    @pytest.mark.asyncio
    async def test_plain_list_with_provider_uses_fallback(self, provider):
        result = await classify("I love music", ["music"], [], 0.35, provider)
        assert result.reason == "Direct match: music"
        assert provider.calls == []

    @pytest.mark.asyncio
    async def test_provider_failure_falls_back(self):
        provider = FakeEmbeddingProvider(fail_on="boom")
        snapshot = await build_snapshot(provider, ["music"])
        result = await classify("boom, music festival", snapshot, [], 0.35, provider)
        assert result.is_uninteresting is False
        assert result.reason == "Direct match: music"

    @pytest.mark.asyncio
    async def test_unexpected_error_hides(self, monkeypatch):
        def explode(*args, **kwargs):
            raise KeyError("corrupt")

        monkeypatch.setattr(engine, "fallback_classify", explode)
        result = await classify("whatever", ["ai"])
        assert result.is_uninteresting is True
        assert result.reason == CLASSIFICATION_ERROR_REASON


class TestAlwaysReturnsResult:
    @pytest.mark.parametrize("text", [None, 0, 3.5, [], {}])
    @pytest.mark.asyncio
    async def test_invalid_text(self, text, provider):
        snapshot = await build_snapshot(provider, ["ai"])
        result = await classify(text, snapshot, [], 0.35, provider)
        assert result.is_uninteresting is True
        assert result.reason == INVALID_INPUT_REASON

    @pytest.mark.parametrize("text", ["", "🚀🚀🚀", "日本語のツイート", "   "])
    @pytest.mark.parametrize("interests", [[], ["ai"], None])
    @pytest.mark.asyncio
    async def test_fallback_edge_inputs(self, text, interests):
        result = await classify(text, interests)
        assert isinstance(result.is_uninteresting, bool)
        assert result.reason

    @pytest.mark.asyncio
    async def test_emoji_text_with_provider(self, provider):
        snapshot = await build_snapshot(provider, ["ai"])
        result = await classify("🚀🚀🚀", snapshot, [], 0.35, provider)
        assert result.is_uninteresting is True
        assert result.reason == "sim=0.00"
