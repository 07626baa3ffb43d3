# feed_curator/classification/__init__.py
"""Two-tier classification.

Components:
- classify: Entry point; tier 1 (embeddings) when a provider is available, tier 2 otherwise
- fallback_classify: Rule-based tier 2
- cosine_similarity / max_similarity: Vector helpers used by tier 1
"""

from feed_curator.classification.engine import (
    CLASSIFICATION_ERROR_REASON,
    NO_INTERESTS_REASON,
    classify,
    semantic_classify,
)
from feed_curator.classification.fallback import (
    FALLBACK_SPAM_KEYWORDS,
    INVALID_INPUT_REASON,
    NO_MATCH_REASON,
    QUALITY_INDICATORS,
    fallback_classify,
)
from feed_curator.classification.similarity import cosine_similarity, max_similarity

__all__ = [
    "CLASSIFICATION_ERROR_REASON",
    "FALLBACK_SPAM_KEYWORDS",
    "INVALID_INPUT_REASON",
    "NO_INTERESTS_REASON",
    "NO_MATCH_REASON",
    "QUALITY_INDICATORS",
    "classify",
    "cosine_similarity",
    "fallback_classify",
    "max_similarity",
    "semantic_classify",
]
