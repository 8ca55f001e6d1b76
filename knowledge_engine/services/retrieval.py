"""
Retrieval Engine - ranks every node of a user's snapshot against a query.

total = w_semantic * semantic + w_recency * recency
      + w_importance * importance + w_lexical * lexical

Default weights 0.45 / 0.20 / 0.20 / 0.15. No index: the snapshot is
scored in full on every call.
"""

from datetime import UTC, datetime

from knowledge_engine.config import RetrievalConfig
from knowledge_engine.core.embeddings.base import Embedder
from knowledge_engine.core.embeddings.hashing import HashingEmbedder
from knowledge_engine.core.scoring.signals import (
    clamp,
    lexical_score,
    recency_score,
    semantic_score,
    weighted_total,
)
from knowledge_engine.core.store.knowledge_store import KnowledgeStore
from knowledge_engine.models import (
    KnowledgeNode,
    RetrievalHit,
    RetrievalResult,
    SourceDocument,
    SourceType,
)
from knowledge_engine.utils.exceptions import EmbeddingError, InvalidInputError
from knowledge_engine.utils.logger import get_logger

logger = get_logger(__name__)


class RetrievalEngine:
    """
    Multi-signal ranking over a user's knowledge snapshot.

    Read-only: never takes the store's update lock.
    """

    def __init__(
        self,
        store: KnowledgeStore,
        embedder: Embedder | None = None,
        config: RetrievalConfig | None = None,
    ):
        """
        Initialize the retrieval engine.

        Args:
            store: Knowledge store to read from
            embedder: Embedder for the query; must match the one used at ingestion
            config: Retrieval configuration
        """
        self.store = store
        self.embedder = embedder or HashingEmbedder()
        self.config = config or RetrievalConfig()

    @property
    def formula(self) -> str:
        return self.config.weights.formula

    def score_node(
        self,
        node: KnowledgeNode,
        source: SourceDocument,
        query: str,
        query_embedding: list[float],
        now: datetime,
    ) -> RetrievalHit:
        """
        Compute the four signals and the weighted total for one node.

        Signals are reported rounded to 4 decimals; the total is computed
        from the unrounded signals.
        """
        semantic = semantic_score(query_embedding, node.embedding)
        recency = recency_score(node.created_at, now, self.config.recency_half_life_days)
        importance = clamp(node.importance)
        lexical = lexical_score(
            query,
            node.text,
            phrase_boost=self.config.phrase_boost,
            min_token_length=self.config.min_token_length,
        )
        total = weighted_total(semantic, recency, importance, lexical, self.config.weights)

        return RetrievalHit(
            node=node,
            source=source,
            score=total,
            semantic=round(semantic, 4),
            recency=round(recency, 4),
            importance=round(importance, 4),
            lexical=round(lexical, 4),
        )

    async def retrieve(
        self,
        user_id: str,
        query: str,
        top_k: int | None = None,
        now: datetime | None = None,
    ) -> RetrievalResult:
        """
        Rank a user's nodes against a query.

        Args:
            user_id: Owner user ID
            query: Free-text query
            top_k: Number of hits (default from config, minimum 1)
            now: Reference time for recency (defaults to current UTC time)

        Returns:
            RetrievalResult with hits sorted by descending score;
            zero hits for an empty snapshot

        Raises:
            EmbeddingError: If the query cannot be embedded
            StoreUnavailableError: If the store fails to load
        """
        now = now or datetime.now(UTC)
        if now.tzinfo is None:
            now = now.replace(tzinfo=UTC)
        limit = max(1, top_k if top_k is not None else self.config.top_k)

        snapshot = await self.store.load(user_id)
        sources = {source.id: source for source in snapshot.sources}

        try:
            query_embedding = await self.embedder.embed(query or "")
        except Exception as e:
            logger.error(
                "Failed to embed query",
                extra={"operation": "retrieve", "error": str(e)},
            )
            raise EmbeddingError(f"Failed to embed query: {e}") from e

        hits = [
            self.score_node(node, sources[node.source_id], query or "", query_embedding, now)
            for node in snapshot.nodes
            if node.source_id in sources
        ]
        # Node id breaks ties so equal scores keep a stable order
        hits.sort(key=lambda hit: (-hit.score, hit.node.id))

        logger.debug(
            f"Scored {len(hits)} nodes, returning {min(limit, len(hits))}",
            extra={"operation": "retrieve", "user_id": user_id},
        )

        return RetrievalResult(
            query=query or "",
            hits=hits[:limit],
            formula=self.formula,
            generated_at=now,
        )

    async def search_sources(
        self,
        user_id: str,
        term: str | None = None,
        source_type: SourceType | str | None = None,
    ) -> list[SourceDocument]:
        """
        List a user's sources, newest first.

        Args:
            user_id: Owner user ID
            term: Case-insensitive substring of title, text or uri
            source_type: Restrict to one source type ("all" or None for every type)

        Returns:
            Matching sources

        Raises:
            InvalidInputError: If source_type is unknown
        """
        snapshot = await self.store.load(user_id)
        lowered = (term or "").strip().lower()
        type_filter = None
        if source_type and source_type != "all":
            try:
                type_filter = SourceType(source_type)
            except ValueError as e:
                raise InvalidInputError(
                    f"Unknown source type: {source_type}", context={"source_type": source_type}
                ) from e

        matches = [
            source
            for source in snapshot.sources
            if (type_filter is None or source.type == type_filter)
            and (not lowered or source.matches(lowered))
        ]
        return sorted(matches, key=lambda source: source.created_at, reverse=True)
