# feed_curator/classification/fallback.py
"""
Rule-based fallback classifier (tier 2).

Used whenever the embedding provider is unavailable. Rules run in strict
precedence order and the first match wins:

1. spam keyword              -> hide
2. direct interest substring -> keep
3. engagement-bait opener    -> hide
4. quality indicator         -> keep
5. weak token overlap > 0.5  -> keep
6. otherwise                 -> hide
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence

from feed_curator.models.classification import ClassificationResult

# Fixed spam list; caller-supplied keywords are checked after these
FALLBACK_SPAM_KEYWORDS: tuple[str, ...] = (
    "sponsored",
    "promoted",
    "advertisement",
    "buy now",
    "click here",
    "limited time",
    "act now",
    "dm me",
    "link in bio",
    "follow back",
    "get rich",
    "make money",
    "work from home",
    "crypto opportunity",
    "investment opportunity",
    "f4f",
    "l4l",
    "check my bio",
    "promo code",
)

QUALITY_INDICATORS: tuple[str, ...] = (
    "research",
    "study",
    "analysis",
    "breakthrough",
    "discovered",
    "published",
    "scientists",
    "university",
    "paper",
    "findings",
    "data shows",
)

ENGAGEMENT_BAIT = re.compile(r"^(rt if|retweet if|like if|agree or disagree)", re.IGNORECASE)

# text token -> interest tokens it stands for
ABBREVIATIONS: dict[str, frozenset[str]] = {
    "ai": frozenset({"artificial", "intelligence"}),
    "ml": frozenset({"machine", "learning"}),
    "gpu": frozenset({"graphics"}),
    "cpu": frozenset({"processor"}),
}

MIN_OVERLAP_TOKEN = 3
SEMANTIC_MATCH_THRESHOLD = 0.5

INVALID_INPUT_REASON = "Invalid text input"
NO_MATCH_REASON = "No matching interests (using fallback classification)"


def _spam_keywords(extra: Iterable[str] | None) -> list[str]:
    keywords = list(FALLBACK_SPAM_KEYWORDS)
    for keyword in extra or ():
        k = keyword.strip().lower()
        if k and k not in keywords:
            keywords.append(k)
    return keywords


def overlap_score(words: Sequence[str], interest: str) -> float:
    """Share of the interest's tokens matched by the text's tokens.

    A pair counts when both tokens are at least three characters and one
    contains the other, or when the text token is a known abbreviation of
    the interest token. Every matching pair counts, so the score can
    exceed 1.0.
    """
    interest_words = interest.lower().split()
    if not interest_words:
        return 0.0

    matches = 0
    for word in words:
        expansions = ABBREVIATIONS.get(word, frozenset())
        for i_word in interest_words:
            if (
                len(word) >= MIN_OVERLAP_TOKEN
                and len(i_word) >= MIN_OVERLAP_TOKEN
                and (i_word in word or word in i_word)
            ):
                matches += 1
            if i_word in expansions:
                matches += 1
    return matches / len(interest_words)


def fallback_classify(
    text: object,
    interests: Sequence[str] | None = None,
    spam_keywords: Iterable[str] | None = None,
) -> ClassificationResult:
    """Classify ``text`` without embeddings."""
    if not isinstance(text, str):
        return ClassificationResult.hide(INVALID_INPUT_REASON)

    lower_text = text.lower()
    interests = [i for i in (interests or []) if isinstance(i, str) and i.strip()]

    for keyword in _spam_keywords(spam_keywords):
        if keyword in lower_text:
            return ClassificationResult.hide(f"Spam keyword: {keyword}")

    words = lower_text.split()
    best_match: str | None = None
    best_score = 0.0
    for interest in interests:
        if interest.lower() in lower_text:
            return ClassificationResult.keep(f"Direct match: {interest}")
        score = overlap_score(words, interest)
        if score > best_score:
            best_score = score
            best_match = interest

    if ENGAGEMENT_BAIT.match(text):
        return ClassificationResult.hide("Engagement bait pattern")

    for indicator in QUALITY_INDICATORS:
        if indicator in lower_text:
            return ClassificationResult.keep(f"Quality content: {indicator}")

    if best_match is not None and best_score > SEMANTIC_MATCH_THRESHOLD:
        return ClassificationResult.keep(f"Semantic match: {best_match} ({round(best_score * 100)}%)")

    return ClassificationResult.hide(NO_MATCH_REASON)
