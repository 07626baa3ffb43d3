# feed_curator/embeddings/provider.py
"""Embedding provider contracts.

The curator only consumes two things from the inference stack: a way to
build a provider (:class:`ProviderFactory`, driven by the model lifecycle
manager) and the provider itself (:class:`EmbeddingProvider`).
"""

from __future__ import annotations

from collections.abc import Sequence
from types import ModuleType
from typing import Protocol, runtime_checkable

import numpy as np


@runtime_checkable
class EmbeddingProvider(Protocol):
    """Turns texts into fixed-dimension vectors."""

    @property
    def dimension(self) -> int: ...

    async def embed(self, texts: Sequence[str]) -> list[np.ndarray]: ...


class ProviderFactory(Protocol):
    """Builds an :class:`EmbeddingProvider` in three steps."""

    #: URL whose reachability proves the model can be downloaded
    probe_url: str

    def import_library(self) -> ModuleType:
        """Import the inference library. May raise ``ImportError``."""
        ...

    def construct(self, library: ModuleType) -> EmbeddingProvider:
        """Download weights and tokenizer and build the provider. Blocking."""
        ...
