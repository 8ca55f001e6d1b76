"""
Snapshot storage for the knowledge engine.

Available adapters:
- InMemorySnapshotAdapter: In-process, default
- SQLiteSnapshotAdapter: One row per user via aiosqlite
"""

from knowledge_engine.core.store.base import SnapshotAdapter
from knowledge_engine.core.store.knowledge_store import KnowledgeStore, SnapshotUpdater
from knowledge_engine.core.store.memory_adapter import InMemorySnapshotAdapter
from knowledge_engine.core.store.retention import apply_retention
from knowledge_engine.core.store.sqlite_adapter import SQLiteSnapshotAdapter

__all__ = [
    "KnowledgeStore",
    "SnapshotAdapter",
    "SnapshotUpdater",
    "InMemorySnapshotAdapter",
    "SQLiteSnapshotAdapter",
    "apply_retention",
]
