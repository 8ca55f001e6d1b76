"""
Deterministic hashed bag-of-words embeddings.

Every token is hashed with a stable digest into one of ``dimensions``
slots with a +/- sign, weighted by token length, and the result is
L2-normalized. Identical text always maps to the identical vector and
texts sharing vocabulary share slots, which is all semantic scoring
needs from an embedding. No randomness, no network.
"""

import hashlib

import numpy as np

from knowledge_engine.core.embeddings.base import Embedder
from knowledge_engine.utils.text import tokenize

DEFAULT_DIMENSIONS = 256
MIN_DIMENSIONS = 8


def _hash_token(token: str) -> int:
    # Stable across processes; builtin hash() is salted
    digest = hashlib.blake2b(token.encode("utf-8"), digest_size=8).digest()
    return int.from_bytes(digest, "big")


def build_deterministic_embedding(text: str, dimensions: int = DEFAULT_DIMENSIONS) -> list[float]:
    """
    Map text to a fixed-length unit vector.

    Args:
        text: Text to embed
        dimensions: Vector length (at least 8)

    Returns:
        L2-normalized vector; the unit vector e0 when text has no tokens
    """
    size = max(MIN_DIMENSIONS, dimensions)
    vector = np.zeros(size, dtype=np.float64)
    tokens = tokenize(text)

    if not tokens:
        vector[0] = 1.0
        return vector.tolist()

    for token in tokens:
        token_hash = _hash_token(token)
        slot = token_hash % size
        sign = 1.0 if (token_hash >> 32) % 2 == 0 else -1.0
        vector[slot] += sign * (1.0 + len(token) / 12.0)

    magnitude = np.linalg.norm(vector)
    if magnitude == 0:
        # Every token cancelled out
        vector[0] = 1.0
        return vector.tolist()

    return (vector / magnitude).tolist()


def cosine_similarity(left: list[float], right: list[float]) -> float:
    """
    Cosine similarity of two vectors, clamped to [-1, 1].

    Vectors of different length are compared on their common prefix.
    Empty, all-zero or non-finite input yields 0.

    Args:
        left: First vector
        right: Second vector

    Returns:
        Similarity in [-1, 1]
    """
    size = min(len(left), len(right))
    if size == 0:
        return 0.0

    left_vec = np.nan_to_num(np.asarray(left[:size], dtype=np.float64), nan=0.0, posinf=0.0, neginf=0.0)
    right_vec = np.nan_to_num(np.asarray(right[:size], dtype=np.float64), nan=0.0, posinf=0.0, neginf=0.0)

    left_norm = np.linalg.norm(left_vec)
    right_norm = np.linalg.norm(right_vec)
    if left_norm == 0 or right_norm == 0:
        return 0.0

    similarity = float(np.dot(left_vec, right_vec) / (left_norm * right_norm))
    return max(-1.0, min(1.0, similarity))


class HashingEmbedder(Embedder):
    """
    Embedder backed by ``build_deterministic_embedding``.

    Usage:
        embedder = HashingEmbedder(dimension=256)
        vector = await embedder.embed("quarterly launch plan")
    """

    def __init__(self, dimension: int = DEFAULT_DIMENSIONS):
        """
        Initialize hashing embedder.

        Args:
            dimension: Output vector length (floored at 8)
        """
        self.dimension = max(MIN_DIMENSIONS, dimension)

    async def embed(self, text: str, **kwargs) -> list[float]:
        return build_deterministic_embedding(text, self.dimension)

    async def get_dimension(self) -> int:
        return self.dimension
