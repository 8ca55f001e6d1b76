"""
Factory for creating the snapshot store.
"""

from knowledge_engine.config import StoreConfig
from knowledge_engine.core.store.base import SnapshotAdapter
from knowledge_engine.core.store.knowledge_store import KnowledgeStore
from knowledge_engine.core.store.memory_adapter import InMemorySnapshotAdapter
from knowledge_engine.core.store.sqlite_adapter import SQLiteSnapshotAdapter
from knowledge_engine.utils.exceptions import ConfigurationError


class StoreFactory:
    """Factory for creating snapshot stores from configuration."""

    @staticmethod
    def create_adapter(config: StoreConfig) -> SnapshotAdapter:
        """
        Create the persistence adapter.

        Args:
            config: Store configuration

        Returns:
            Snapshot adapter instance

        Raises:
            ConfigurationError: If backend is not supported
        """
        if config.backend == "memory":
            return InMemorySnapshotAdapter()
        elif config.backend == "sqlite":
            return SQLiteSnapshotAdapter(db_path=config.db_path)
        else:
            raise ConfigurationError(
                f"Unsupported store backend: {config.backend}",
                context={"backend": config.backend},
            )

    @staticmethod
    def create(config: StoreConfig) -> KnowledgeStore:
        """Create a KnowledgeStore over the configured adapter."""
        return KnowledgeStore(adapter=StoreFactory.create_adapter(config))
