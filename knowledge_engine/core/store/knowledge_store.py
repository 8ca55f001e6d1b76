"""
Knowledge Store - per-user snapshot access with atomic read-modify-write.

Key responsibilities:
- Decode adapter payloads into validated KnowledgeSnapshot objects
- Serialize updates per user so concurrent ingestions never lose writes
- Translate adapter failures into StoreUnavailableError
"""

import asyncio
from collections.abc import Callable
from datetime import UTC, datetime

from pydantic import ValidationError as PydanticValidationError

from knowledge_engine.core.store.base import SnapshotAdapter
from knowledge_engine.core.store.memory_adapter import InMemorySnapshotAdapter
from knowledge_engine.models.snapshot import KnowledgeSnapshot
from knowledge_engine.utils.exceptions import StoreUnavailableError
from knowledge_engine.utils.logger import get_logger

logger = get_logger(__name__)

SnapshotUpdater = Callable[[KnowledgeSnapshot], KnowledgeSnapshot]


class KnowledgeStore:
    """
    Per-user snapshot store.

    ``update`` holds a per-user lock for the whole load -> fn -> save
    cycle; different users never wait on each other. ``load`` takes no
    lock and sees either the previous or the next snapshot, since
    adapters replace whole payloads.
    """

    def __init__(self, adapter: SnapshotAdapter | None = None):
        """
        Initialize the store.

        Args:
            adapter: Persistence backend (defaults to in-memory)
        """
        self.adapter = adapter or InMemorySnapshotAdapter()
        self._locks: dict[str, asyncio.Lock] = {}

    async def initialize(self) -> None:
        """Initialize the persistence backend."""
        try:
            await self.adapter.initialize()
        except Exception as e:
            logger.error("Failed to initialize snapshot adapter", extra={"error": str(e)})
            raise StoreUnavailableError(
                f"Failed to initialize snapshot store: {e}",
                context={"adapter": type(self.adapter).__name__},
            ) from e

    def _lock_for(self, user_id: str) -> asyncio.Lock:
        # No await between lookup and insert
        return self._locks.setdefault(user_id, asyncio.Lock())

    async def load(self, user_id: str) -> KnowledgeSnapshot:
        """
        Load a user's snapshot.

        Args:
            user_id: Owner user ID

        Returns:
            Stored snapshot, or an empty snapshot for an unknown user

        Raises:
            StoreUnavailableError: If the adapter fails or the payload is corrupt
        """
        try:
            payload = await self.adapter.read(user_id)
        except Exception as e:
            logger.error(
                "Failed to load snapshot",
                extra={"operation": "load", "user_id": user_id, "error": str(e)},
            )
            raise StoreUnavailableError(
                f"Failed to load snapshot for user {user_id}: {e}",
                context={"user_id": user_id},
            ) from e

        if payload is None:
            return KnowledgeSnapshot.empty()

        try:
            return KnowledgeSnapshot.model_validate(payload)
        except PydanticValidationError as e:
            logger.error(
                "Stored snapshot is invalid",
                extra={"operation": "load", "user_id": user_id},
            )
            raise StoreUnavailableError(
                f"Stored snapshot for user {user_id} is invalid",
                context={"user_id": user_id, "errors": e.error_count()},
            ) from e

    async def save(self, user_id: str, snapshot: KnowledgeSnapshot) -> KnowledgeSnapshot:
        """
        Persist a snapshot as-is, stamping ``updated_at``.

        Prefer ``update`` for read-modify-write cycles.

        Returns:
            The persisted snapshot
        """
        stamped = snapshot.model_copy(update={"updated_at": datetime.now(UTC)})
        try:
            await self.adapter.write(user_id, stamped.model_dump(mode="json"))
        except Exception as e:
            logger.error(
                "Failed to save snapshot",
                extra={"operation": "save", "user_id": user_id, "error": str(e)},
            )
            raise StoreUnavailableError(
                f"Failed to save snapshot for user {user_id}: {e}",
                context={"user_id": user_id},
            ) from e
        return stamped

    async def update(self, user_id: str, fn: SnapshotUpdater) -> KnowledgeSnapshot:
        """
        Atomically transform a user's snapshot.

        ``fn`` receives the current snapshot and must return the next one
        without side effects; exactly what it returns is persisted.

        Args:
            user_id: Owner user ID
            fn: Pure snapshot transformation

        Returns:
            The persisted snapshot

        Raises:
            StoreUnavailableError: If loading or saving fails
        """
        async with self._lock_for(user_id):
            current = await self.load(user_id)
            next_snapshot = fn(current)
            return await self.save(user_id, next_snapshot)

    async def close(self) -> None:
        """Close the persistence backend."""
        await self.adapter.close()
