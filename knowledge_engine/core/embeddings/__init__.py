"""
Embedder abstraction layer for text embeddings.

Supported providers:
- hashing (deterministic, in-process)
"""

from knowledge_engine.core.embeddings.base import Embedder
from knowledge_engine.core.embeddings.hashing import (
    HashingEmbedder,
    build_deterministic_embedding,
    cosine_similarity,
)

__all__ = [
    "Embedder",
    "HashingEmbedder",
    "build_deterministic_embedding",
    "cosine_similarity",
]
