# feed_curator/interest_cache.py
"""
Interest Cache - interest terms plus their embeddings.

The cache is recomputed wholesale whenever the interest list changes or the
provider becomes ready. A recompute requested before the provider is ready
is parked and applied on the ready transition.

Readers always get a consistent :class:`InterestSnapshot`: the new snapshot
is built off to the side and swapped in with a single assignment, and a
recompute that has been superseded while it was awaiting embeddings is
dropped rather than published.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

import numpy as np
from pydantic import BaseModel, ConfigDict, Field

from feed_curator.embeddings.provider import EmbeddingProvider

logger = logging.getLogger(__name__)


def normalize_interests(interests: Iterable[object] | None) -> list[str]:
    """Lower-case, trim, drop empties and duplicates, keep order."""
    result: list[str] = []
    for interest in interests or []:
        if not isinstance(interest, str):
            continue
        term = interest.strip().lower()
        if term and term not in result:
            result.append(term)
    return result


class InterestSnapshot(BaseModel):
    """Immutable view of the cache: interests and embeddings, index-aligned."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    interests: tuple[str, ...] = Field(default_factory=tuple)
    embeddings: tuple[np.ndarray, ...] = Field(default_factory=tuple)
    generation: int = 0

    def __len__(self) -> int:
        return len(self.interests)


class InterestCache:
    """Owner of the interest embeddings inside the inference context."""

    def __init__(self) -> None:
        self._snapshot = InterestSnapshot()
        self._provider: EmbeddingProvider | None = None
        self._pending: list[str] | None = None
        self._generation = 0

    @property
    def ready(self) -> bool:
        return self._provider is not None

    @property
    def pending(self) -> list[str] | None:
        """Interests waiting for the provider, if any."""
        return list(self._pending) if self._pending is not None else None

    @property
    def interests(self) -> list[str]:
        return list(self._snapshot.interests)

    @property
    def embeddings(self) -> list[np.ndarray]:
        return list(self._snapshot.embeddings)

    def snapshot(self) -> InterestSnapshot:
        return self._snapshot

    async def recompute(self, interests: Iterable[object] | None) -> bool:
        """
        Rebuild the cache for ``interests``.

        Returns True when a new snapshot was published. When the provider is
        not ready the request is remembered and the cache left untouched.
        """
        terms = normalize_interests(interests)
        if self._provider is None:
            self._pending = terms
            logger.debug(f"Provider not ready, deferring recompute of {len(terms)} interests")
            return False
        return await self._rebuild(terms, self._provider)

    async def on_provider_ready(self, provider: EmbeddingProvider) -> bool:
        """Attach the provider and apply any parked recompute."""
        self._provider = provider
        if self._pending is None:
            return False
        terms = self._pending
        self._pending = None
        return await self._rebuild(terms, provider)

    def detach(self) -> None:
        """Forget the provider (e.g. after a reset); the snapshot is kept until the next rebuild."""
        self._provider = None

    async def _rebuild(self, terms: list[str], provider: EmbeddingProvider) -> bool:
        self._generation += 1
        generation = self._generation

        vectors = await provider.embed(terms) if terms else []
        if len(vectors) != len(terms):
            raise ValueError(f"Provider returned {len(vectors)} embeddings for {len(terms)} interests")

        if generation != self._generation:
            logger.debug(f"Discarding superseded interest recompute (generation {generation})")
            return False

        self._snapshot = InterestSnapshot(
            interests=tuple(terms),
            embeddings=tuple(np.asarray(v, dtype=np.float32) for v in vectors),
            generation=generation,
        )
        logger.info(f"Interest cache rebuilt with {len(terms)} interests")
        return True
