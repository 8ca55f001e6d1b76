"""
SQLite snapshot adapter.

One row per user holding the whole snapshot as JSON, using aiosqlite.
"""

import asyncio
import json
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

import aiosqlite

from knowledge_engine.core.store.base import SnapshotAdapter


class SQLiteSnapshotAdapter(SnapshotAdapter):
    """
    SQLite-based snapshot persistence.

    Features:
    - Fast local storage
    - Whole-row upsert, so readers see the old or the new snapshot
    - WAL journal for concurrent readers
    - One shared connection, opened on first use if ``initialize`` was not called
    """

    def __init__(self, db_path: str = "data/knowledge.db"):
        """
        Initialize SQLite snapshot adapter.

        Args:
            db_path: Path to SQLite database file
        """
        self.db_path = db_path
        self.connection: aiosqlite.Connection | None = None
        self._initialized = False
        self._init_lock = asyncio.Lock()

        Path(db_path).parent.mkdir(parents=True, exist_ok=True)

    async def connect(self) -> None:
        """Establish connection to SQLite."""
        if self.connection is None:
            self.connection = await aiosqlite.connect(self.db_path)
            await self.connection.execute("PRAGMA journal_mode = WAL")
            await self.connection.commit()

    async def initialize(self) -> None:
        """Initialize database schema. Runs once until ``close``."""
        if self._initialized:
            return

        async with self._init_lock:
            if self._initialized:
                return

            await self.connect()
            await self.connection.execute(
                """
                CREATE TABLE IF NOT EXISTS knowledge_snapshots (
                    user_id TEXT PRIMARY KEY,
                    payload TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
            """
            )
            await self.connection.commit()
            self._initialized = True

    async def read(self, user_id: str) -> dict[str, Any] | None:
        await self.initialize()

        cursor = await self.connection.execute(
            "SELECT payload FROM knowledge_snapshots WHERE user_id = ?", (user_id,)
        )
        row = await cursor.fetchone()
        await cursor.close()

        if not row:
            return None
        return json.loads(row[0])

    async def write(self, user_id: str, payload: dict[str, Any]) -> None:
        await self.initialize()

        await self.connection.execute(
            """
            INSERT INTO knowledge_snapshots (user_id, payload, updated_at)
            VALUES (?, ?, ?)
            ON CONFLICT(user_id) DO UPDATE SET
                payload = excluded.payload,
                updated_at = excluded.updated_at
            """,
            (user_id, json.dumps(payload), datetime.now(UTC).isoformat()),
        )
        await self.connection.commit()

    async def count_users(self) -> int:
        await self.initialize()

        cursor = await self.connection.execute("SELECT COUNT(*) FROM knowledge_snapshots")
        row = await cursor.fetchone()
        await cursor.close()
        return row[0] if row else 0

    async def close(self) -> None:
        """Close the SQLite connection."""
        async with self._init_lock:
            if self.connection:
                await self.connection.close()
                self.connection = None
            self._initialized = False
