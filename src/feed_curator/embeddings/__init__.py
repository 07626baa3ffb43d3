# feed_curator/embeddings/__init__.py
"""Embedding provider contracts and the local sentence-transformers provider."""

from feed_curator.embeddings.provider import EmbeddingProvider, ProviderFactory
from feed_curator.embeddings.sentence_transformers import (
    SentenceTransformerFactory,
    SentenceTransformerProvider,
)

__all__ = [
    "EmbeddingProvider",
    "ProviderFactory",
    "SentenceTransformerFactory",
    "SentenceTransformerProvider",
]
