"""
Embedder interface.

Ingestion and retrieval only see this class. Whatever produces the
vectors must be deterministic for a given text, and the same embedder
must serve both sides, or stored node vectors and query vectors stop
being comparable.
"""

from abc import ABC, abstractmethod


class Embedder(ABC):
    """Turns text into a fixed-length vector."""

    @abstractmethod
    async def embed(self, text: str, **kwargs) -> list[float]:
        """
        Embed one text.

        Args:
            text: Chunk or query text; may be empty

        Returns:
            Vector of ``get_dimension()`` floats
        """

    async def batch_embed(self, texts: list[str], **kwargs) -> list[list[float]]:
        """Embed chunks in order, one ``embed`` call each."""
        return [await self.embed(text, **kwargs) for text in texts]

    @abstractmethod
    async def get_dimension(self) -> int:
        """Length of every vector this embedder returns."""

    async def close(self) -> None:
        """Release provider resources; nothing to do for in-process embedders."""
