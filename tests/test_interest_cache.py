# tests/test_interest_cache.py
"""Tests for the interest cache and its deferred recompute."""

import asyncio

import numpy as np
import pytest

from feed_curator.interest_cache import InterestCache, normalize_interests


class GatedProvider:
    """Provider whose first ``embed`` call waits for a gate."""

    dimension = 3

    def __init__(self):
        self.gate = asyncio.Event()
        self.calls = 0

    async def embed(self, texts):
        self.calls += 1
        if self.calls == 1:
            await self.gate.wait()
        return [np.ones(3, dtype=np.float32) for _ in texts]


class ShortProvider:
    dimension = 3

    async def embed(self, texts):
        return [np.ones(3)]


class TestNormalizeInterests:
    def test_lowercases_trims_and_dedupes(self):
        assert normalize_interests(["  AI ", "ai", "Music", "", "music "]) == ["ai", "music"]

    def test_skips_non_strings(self):
        assert normalize_interests(["ai", None, 3, "gpus"]) == ["ai", "gpus"]

    def test_none(self):
        assert normalize_interests(None) == []


class TestDeferredRecompute:
    @pytest.mark.asyncio
    async def test_recompute_before_ready_is_parked(self):
        cache = InterestCache()
        assert await cache.recompute(["AI", "music"]) is False

        assert cache.ready is False
        assert cache.interests == []
        assert cache.embeddings == []
        assert cache.pending == ["ai", "music"]

    @pytest.mark.asyncio
    async def test_parked_recompute_applied_on_ready(self, provider):
        cache = InterestCache()
        await cache.recompute(["ai", "music"])

        assert await cache.on_provider_ready(provider) is True
        assert cache.interests == ["ai", "music"]
        assert len(cache.embeddings) == 2
        assert cache.pending is None

    @pytest.mark.asyncio
    async def test_latest_parked_request_wins(self, provider):
        cache = InterestCache()
        await cache.recompute(["ai"])
        await cache.recompute(["finance"])

        await cache.on_provider_ready(provider)
        assert cache.interests == ["finance"]

    @pytest.mark.asyncio
    async def test_ready_without_pending(self, provider):
        cache = InterestCache()
        assert await cache.on_provider_ready(provider) is False
        assert cache.ready is True
        assert cache.interests == []


class TestRecompute:
    @pytest.mark.asyncio
    async def test_recompute_with_provider(self, provider):
        cache = InterestCache()
        await cache.on_provider_ready(provider)

        assert await cache.recompute(["gpus", "semiconductors"]) is True
        snapshot = cache.snapshot()
        assert snapshot.interests == ("gpus", "semiconductors")
        assert len(snapshot) == 2
        assert all(e.dtype == np.float32 for e in snapshot.embeddings)

    @pytest.mark.asyncio
    async def test_empty_interests(self, provider):
        cache = InterestCache()
        await cache.on_provider_ready(provider)
        await cache.recompute(["ai"])

        assert await cache.recompute([]) is True
        assert cache.interests == []
        assert provider.calls == [["ai"]]

    @pytest.mark.asyncio
    async def test_snapshot_is_swapped_not_mutated(self, provider):
        cache = InterestCache()
        await cache.on_provider_ready(provider)
        await cache.recompute(["ai"])
        before = cache.snapshot()

        await cache.recompute(["music"])
        assert before.interests == ("ai",)
        assert cache.snapshot().interests == ("music",)
        assert cache.snapshot().generation > before.generation

    @pytest.mark.asyncio
    async def test_superseded_recompute_is_discarded(self):
        provider = GatedProvider()
        cache = InterestCache()
        await cache.on_provider_ready(provider)

        slow = asyncio.create_task(cache.recompute(["ai"]))
        await asyncio.sleep(0)
        assert await cache.recompute(["music"]) is True

        provider.gate.set()
        assert await slow is False
        assert cache.interests == ["music"]

    @pytest.mark.asyncio
    async def test_mismatched_embedding_count(self):
        cache = InterestCache()
        await cache.on_provider_ready(ShortProvider())
        with pytest.raises(ValueError):
            await cache.recompute(["ai", "music"])
        assert cache.interests == []

    @pytest.mark.asyncio
    async def test_detach(self, provider):
        cache = InterestCache()
        await cache.on_provider_ready(provider)
        await cache.recompute(["ai"])

        cache.detach()
        assert cache.ready is False
        assert cache.interests == ["ai"]
        assert await cache.recompute(["music"]) is False
        assert cache.pending == ["music"]
