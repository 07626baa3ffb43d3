# examples/01_fallback_classification.py
"""
🚀 QUICKSTART: Rule-based classification

Classify a few feed items without any model: this is what the curator does
while the embedding model is still downloading (or failed to load).
"""

import asyncio

from feed_curator import classify
from feed_curator.config import DEFAULT_INTERESTS

ITEMS = [
    "Buy now! great ai research",
    "RT if you agree with this",
    "Scientists published a breakthrough study",
    "New gpu benchmarks are out",
    "What I had for breakfast",
]


async def main():
    print(f"🎯 Interests: {', '.join(DEFAULT_INTERESTS)}\n")
    for text in ITEMS:
        result = await classify(text, DEFAULT_INTERESTS)
        icon = "🙈" if result.is_uninteresting else "✅"
        print(f"{icon} {text!r}\n   -> {result.reason}")


if __name__ == "__main__":
    asyncio.run(main())
