"""
Base interface for snapshot persistence.

Adapters store one opaque JSON-compatible payload per user. They know
nothing about sources, nodes or edges; decoding and validation happen
in KnowledgeStore.
"""

from abc import ABC, abstractmethod
from typing import Any


class SnapshotAdapter(ABC):
    """Abstract base class for snapshot persistence backends."""

    async def initialize(self) -> None:
        """Initialize the backend (create tables/schema)."""
        pass

    @abstractmethod
    async def read(self, user_id: str) -> dict[str, Any] | None:
        """
        Read the stored payload of a user.

        Args:
            user_id: Owner user ID

        Returns:
            Payload dict, or None if the user has no snapshot
        """
        pass

    @abstractmethod
    async def write(self, user_id: str, payload: dict[str, Any]) -> None:
        """
        Replace the stored payload of a user in a single step.

        Readers must observe either the previous or the new payload,
        never a mix of both.

        Args:
            user_id: Owner user ID
            payload: JSON-compatible snapshot payload
        """
        pass

    async def close(self) -> None:
        """Close the connection to the backend."""
        pass
