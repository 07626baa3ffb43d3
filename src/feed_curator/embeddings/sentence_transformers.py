# feed_curator/embeddings/sentence_transformers.py
"""
Sentence Transformers provider for fast, lightweight embeddings.

Uses all-MiniLM-L6-v2 by default: 384-dimensional, normalized vectors,
small enough to run on CPU in real time.
"""

from __future__ import annotations

import asyncio
import importlib
import logging
import os
from collections.abc import Sequence
from types import ModuleType
from typing import Any

import numpy as np

from feed_curator.config import DEFAULT_MODEL_REPO, DEFAULT_PROBE_URL

logger = logging.getLogger(__name__)

LIBRARY_NAME = "sentence_transformers"


class SentenceTransformerProvider:
    """Wraps a loaded ``SentenceTransformer`` model."""

    def __init__(self, model: Any, model_name: str = DEFAULT_MODEL_REPO):
        self._model = model
        self.model_name = model_name

    @property
    def dimension(self) -> int:
        return int(self._model.get_sentence_embedding_dimension())

    def _encode(self, texts: list[str]) -> np.ndarray:
        # Normalized so cosine similarity reduces to a dot product
        return self._model.encode(
            texts,
            batch_size=32,
            normalize_embeddings=True,
            convert_to_numpy=True,
            show_progress_bar=False,
        )

    async def embed(self, texts: Sequence[str]) -> list[np.ndarray]:
        if not texts:
            return []
        vectors = await asyncio.to_thread(self._encode, list(texts))
        return [np.asarray(v, dtype=np.float32) for v in vectors]


class SentenceTransformerFactory:
    """
    Builds a :class:`SentenceTransformerProvider`.

    Args:
        model_name: Hugging Face model id
        cache_dir: Directory for caching model files
        device: Torch device (default: cpu)
    """

    def __init__(
        self,
        model_name: str = DEFAULT_MODEL_REPO,
        cache_dir: str | None = None,
        device: str = "cpu",
        probe_url: str = DEFAULT_PROBE_URL,
    ):
        self.model_name = model_name
        self.cache_dir = cache_dir or os.path.join(os.path.expanduser("~"), ".cache", "sentence_transformers")
        self.device = device
        self.probe_url = probe_url

    def import_library(self) -> ModuleType:
        return importlib.import_module(LIBRARY_NAME)

    def construct(self, library: ModuleType) -> SentenceTransformerProvider:
        model = library.SentenceTransformer(
            self.model_name,
            cache_folder=self.cache_dir,
            device=self.device,
        )
        logger.info(f"Loaded embedding model {self.model_name}")
        return SentenceTransformerProvider(model, model_name=self.model_name)
