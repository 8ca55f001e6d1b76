"""
Knowledge Engine - wires store, embedder, ingestion and retrieval.

Brings together:
- Snapshot store (memory or SQLite adapter)
- Deterministic embedder
- Ingestion pipeline
- Retrieval engine
"""

from datetime import datetime
from typing import Any

from knowledge_engine.config import Config
from knowledge_engine.core.chunking.chunker import Chunker
from knowledge_engine.core.embeddings.base import Embedder
from knowledge_engine.core.factory import EmbedderFactory, StoreFactory
from knowledge_engine.core.store.knowledge_store import KnowledgeStore
from knowledge_engine.models import IngestionResult, RetrievalResult, SourceDocument, SourceType
from knowledge_engine.services.ingestion import IngestionPipeline
from knowledge_engine.services.retrieval import RetrievalEngine
from knowledge_engine.utils.logger import get_logger, setup_logging

logger = get_logger(__name__)


class KnowledgeEngine:
    """
    Single entry point for collaborators.

    Exposes the two core operations, ``ingest`` and ``retrieve``, plus
    source listing. Per-type ingestion helpers live on ``ingestion``.
    """

    def __init__(
        self,
        store: KnowledgeStore,
        embedder: Embedder,
        config: Config | None = None,
    ):
        """
        Initialize Knowledge Engine.

        Args:
            store: Snapshot store shared by ingestion and retrieval
            embedder: Embedder shared by ingestion and retrieval
            config: Configuration object
        """
        self.config = config or Config()
        self.store = store
        self.embedder = embedder

        self.ingestion = IngestionPipeline(
            store=store,
            embedder=embedder,
            chunker=Chunker(self.config.chunking),
            config=self.config,
        )
        self.retrieval = RetrievalEngine(
            store=store,
            embedder=embedder,
            config=self.config.retrieval,
        )

    @classmethod
    def from_config(
        cls, config: Config | None = None, configure_logging: bool = True
    ) -> "KnowledgeEngine":
        """
        Build an engine from configuration.

        Args:
            config: Configuration (defaults to Config())
            configure_logging: Apply ``config.logging`` to the global logger

        Returns:
            KnowledgeEngine instance

        Raises:
            ConfigurationError: If the embedder provider or store backend is unknown
        """
        config = config or Config()
        if configure_logging:
            setup_logging(**config.logging.model_dump())
        return cls(
            store=StoreFactory.create(config.store),
            embedder=EmbedderFactory.create(config.embedder),
            config=config,
        )

    async def initialize(self) -> None:
        """Initialize the snapshot store."""
        logger.info("Initializing Knowledge Engine")
        await self.store.initialize()
        logger.info("Knowledge Engine ready")

    async def ingest(
        self,
        user_id: str,
        source_type: SourceType | str,
        title: str,
        text: str,
        uri: str | None = None,
        mime_type: str | None = None,
        metadata: dict[str, Any] | None = None,
        now: datetime | None = None,
        source_id: str | None = None,
    ) -> IngestionResult:
        """Ingest one document. See IngestionPipeline.ingest."""
        return await self.ingestion.ingest(
            user_id=user_id,
            source_type=source_type,
            title=title,
            text=text,
            uri=uri,
            mime_type=mime_type,
            metadata=metadata,
            now=now,
            source_id=source_id,
        )

    async def retrieve(
        self,
        user_id: str,
        query: str,
        top_k: int | None = None,
        now: datetime | None = None,
    ) -> RetrievalResult:
        """Rank a user's knowledge against a query. See RetrievalEngine.retrieve."""
        return await self.retrieval.retrieve(user_id=user_id, query=query, top_k=top_k, now=now)

    async def search_sources(
        self,
        user_id: str,
        term: str | None = None,
        source_type: SourceType | str | None = None,
    ) -> list[SourceDocument]:
        return await self.retrieval.search_sources(
            user_id=user_id, term=term, source_type=source_type
        )

    async def close(self) -> None:
        """Close all connections."""
        logger.info("Closing Knowledge Engine")
        await self.embedder.close()
        await self.store.close()
