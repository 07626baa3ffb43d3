# feed_curator/item_ids.py
"""Stable identifiers for feed items.

A permalink with a ``/status/<digits>`` path gives the canonical id. Without
one, the id falls back to a 32-bit rolling hash over the author, the start of
the text and the image URLs, so the same item seen twice maps to the same id.
"""

from __future__ import annotations

import re
from collections.abc import Sequence

ID_PREFIX = "tweet-"
TEXT_PREFIX_CHARS = 50

_STATUS_RE = re.compile(r"/status/(\d+)")


def _rolling_hash(content: str) -> int:
    # Hash UTF-16 code units so ids agree with observers that hash host strings
    data = content.encode("utf-16-le")
    h = 0
    for i in range(0, len(data), 2):
        code = data[i] | (data[i + 1] << 8)
        h = ((h << 5) - h + code) & 0xFFFFFFFF
    return h - (1 << 32) if h & 0x80000000 else h


def derive_item_id(
    permalink: str | None = None,
    username: str = "",
    text: str = "",
    image_urls: Sequence[str] = (),
) -> str:
    """Return ``tweet-<status id>`` or ``tweet-<hash>``."""
    if permalink:
        match = _STATUS_RE.search(permalink)
        if match:
            return f"{ID_PREFIX}{match.group(1)}"
    content = (username or "") + (text or "")[:TEXT_PREFIX_CHARS] + "".join(image_urls)
    return f"{ID_PREFIX}{_rolling_hash(content)}"
