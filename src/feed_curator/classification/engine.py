# feed_curator/classification/engine.py
"""
Classification engine.

Two tiers:

- Tier 1 (provider available): embed the text and compare it against the
  cached interest embeddings; hide when the best cosine similarity falls
  below the threshold.
- Tier 2 (fallback): the rule-based classifier in :mod:`.fallback`.

:func:`classify` never raises. Provider failures during tier 1 drop to
tier 2; anything else unexpected becomes a safe "hide" result.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

from feed_curator.classification.fallback import INVALID_INPUT_REASON, fallback_classify
from feed_curator.classification.similarity import max_similarity
from feed_curator.config import DEFAULT_THRESHOLD
from feed_curator.embeddings.provider import EmbeddingProvider
from feed_curator.interest_cache import InterestSnapshot
from feed_curator.models.classification import ClassificationResult

logger = logging.getLogger(__name__)

CLASSIFICATION_ERROR_REASON = "classification error"
NO_INTERESTS_REASON = "No interests"


async def semantic_classify(
    text: str,
    snapshot: InterestSnapshot,
    spam_keywords: Iterable[str],
    threshold: float,
    provider: EmbeddingProvider,
) -> ClassificationResult:
    """Tier 1. Raises whatever the provider raises."""
    lower = text.lower()
    for keyword in spam_keywords:
        k = keyword.strip().lower()
        if k and k in lower:
            return ClassificationResult.hide(f"Spam keyword: {k}")

    if not snapshot.interests:
        return ClassificationResult.keep(NO_INTERESTS_REASON)

    [embedding] = await provider.embed([text])
    sim = max_similarity(embedding, snapshot.embeddings)
    return ClassificationResult(
        is_uninteresting=sim < threshold,
        reason=f"sim={sim:.2f}",
        similarity=sim,
    )


async def classify(
    text: object,
    interests: InterestSnapshot | Sequence[str] | None = None,
    spam_keywords: Iterable[str] | None = None,
    threshold: float = DEFAULT_THRESHOLD,
    provider: EmbeddingProvider | None = None,
) -> ClassificationResult:
    """
    Decide whether ``text`` should be hidden.

    Args:
        text: Item text. Anything that is not a ``str`` is invalid input.
        interests: An :class:`InterestSnapshot` (required for tier 1) or a
            plain list of interest terms (tier 2 only).
        spam_keywords: Extra spam keywords.
        threshold: Minimum similarity to keep an item in tier 1.
        provider: Embedding provider; ``None`` means it is unavailable.

    Returns:
        A fully populated :class:`ClassificationResult`.
    """
    try:
        if not isinstance(text, str):
            return ClassificationResult.hide(INVALID_INPUT_REASON)

        spam = [k for k in (spam_keywords or []) if isinstance(k, str)]
        if isinstance(interests, InterestSnapshot):
            snapshot = interests
            terms = list(snapshot.interests)
        else:
            snapshot = None
            terms = [i for i in (interests or []) if isinstance(i, str)]

        if provider is not None and snapshot is not None:
            try:
                return await semantic_classify(text, snapshot, spam, threshold, provider)
            except Exception as e:
                logger.warning(f"Semantic classification failed, using fallback: {e}")

        return fallback_classify(text, terms, spam)
    except Exception:
        logger.exception("Unexpected classification failure")
        return ClassificationResult.hide(CLASSIFICATION_ERROR_REASON)
