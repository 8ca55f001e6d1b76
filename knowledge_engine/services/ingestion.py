"""
Ingestion Pipeline - turns free-form text into source, node and edge records.

normalize -> chunk -> embed -> score importance -> link -> upsert

Each call performs exactly one store update. Source IDs are derived
from content, so re-ingesting identical text is a no-op and
re-ingesting a known source ID replaces its nodes and edges wholesale.
"""

import time
from collections.abc import Iterable
from datetime import UTC, datetime
from typing import Any

from knowledge_engine.config import Config
from knowledge_engine.core.chunking.chunker import Chunker
from knowledge_engine.core.embeddings.base import Embedder
from knowledge_engine.core.embeddings.hashing import HashingEmbedder
from knowledge_engine.core.scoring.importance import score_importance
from knowledge_engine.core.store.knowledge_store import KnowledgeStore
from knowledge_engine.core.store.retention import apply_retention
from knowledge_engine.models import (
    EdgeType,
    IngestionResult,
    IngestionStatus,
    KnowledgeEdge,
    KnowledgeNode,
    KnowledgeSnapshot,
    SourceDocument,
    SourceType,
    compute_content_hash,
)
from knowledge_engine.utils.exceptions import EmbeddingError, InvalidInputError
from knowledge_engine.utils.id_generator import (
    generate_edge_id,
    generate_node_id,
    generate_source_id,
)
from knowledge_engine.utils.logger import get_logger
from knowledge_engine.utils.text import (
    clean_whitespace,
    extract_text_from_html,
    extract_title_from_html,
)

logger = get_logger(__name__)

UNTITLED_SOURCE = "Untitled Source"


def _normalize_now(now: datetime | None) -> datetime:
    if now is None:
        return datetime.now(UTC)
    if now.tzinfo is None:
        return now.replace(tzinfo=UTC)
    return now


def build_source_document(
    user_id: str,
    source_type: SourceType,
    title: str,
    text: str,
    now: datetime,
    uri: str | None = None,
    mime_type: str | None = None,
    metadata: dict[str, Any] | None = None,
    source_id: str | None = None,
) -> SourceDocument:
    """
    Build the normalized source record.

    Args:
        user_id: Owner user ID
        source_type: Source type
        title: Raw title; blank titles become "Untitled Source"
        text: Raw text; whitespace is collapsed
        now: Creation timestamp
        uri: Original URL
        mime_type: MIME type of an uploaded file
        metadata: Caller metadata
        source_id: Explicit ID overriding the content-derived one

    Returns:
        SourceDocument
    """
    normalized_title = clean_whitespace(title) or UNTITLED_SOURCE
    normalized_text = clean_whitespace(text)
    content_hash = compute_content_hash(source_type, normalized_title, normalized_text)

    return SourceDocument(
        id=source_id or generate_source_id(source_type.value, content_hash),
        user_id=user_id,
        type=source_type,
        title=normalized_title,
        uri=uri,
        mime_type=mime_type,
        created_at=now,
        content_hash=content_hash,
        text=normalized_text,
        metadata=metadata or {},
    )


def build_edges(source_id: str, nodes: list[KnowledgeNode]) -> list[KnowledgeEdge]:
    """Chain consecutive nodes of one source: node[i] -> node[i + 1]."""
    return [
        KnowledgeEdge(
            id=generate_edge_id(source_id, index),
            source_id=source_id,
            from_node_id=nodes[index].id,
            to_node_id=nodes[index + 1].id,
            type=EdgeType.SOURCE,
            weight=1.0,
        )
        for index in range(len(nodes) - 1)
    ]


def _upsert_source(
    snapshot: KnowledgeSnapshot,
    source: SourceDocument,
    nodes: list[KnowledgeNode],
    edges: list[KnowledgeEdge],
) -> KnowledgeSnapshot:
    # Replace in place to keep source order stable across re-ingestion
    replaced = False
    sources = []
    for existing in snapshot.sources:
        if existing.id == source.id:
            sources.append(source)
            replaced = True
        else:
            sources.append(existing)
    if not replaced:
        sources.append(source)

    return snapshot.model_copy(
        update={
            "sources": sources,
            "nodes": [node for node in snapshot.nodes if node.source_id != source.id] + nodes,
            "edges": [edge for edge in snapshot.edges if edge.source_id != source.id] + edges,
        }
    )


class IngestionPipeline:
    """
    Orchestrates ingestion of one document into a user's snapshot.

    Usage:
        pipeline = IngestionPipeline(store=KnowledgeStore())
        result = await pipeline.ingest("user_1", "note", "Sprint Plan", "...")
    """

    def __init__(
        self,
        store: KnowledgeStore,
        embedder: Embedder | None = None,
        chunker: Chunker | None = None,
        config: Config | None = None,
    ):
        """
        Initialize the pipeline.

        Args:
            store: Knowledge store to write into
            embedder: Embedder for chunk vectors (defaults to hashing embedder)
            chunker: Chunker (defaults to one built from config)
            config: Configuration object
        """
        self.config = config or Config()
        self.store = store
        self.embedder = embedder or HashingEmbedder(dimension=self.config.embedder.dimension)
        self.chunker = chunker or Chunker(self.config.chunking)

    async def build_nodes(self, source: SourceDocument) -> list[KnowledgeNode]:
        """
        Chunk, embed and score a source's text.

        Args:
            source: Normalized source

        Returns:
            One node per chunk, chunk_index contiguous from 0

        Raises:
            EmbeddingError: If the embedder fails
        """
        chunks = self.chunker.chunk(source.text)
        if not chunks:
            return []

        try:
            embeddings = await self.embedder.batch_embed(chunks)
        except Exception as e:
            logger.error(
                "Failed to embed chunks",
                extra={"operation": "ingest", "source_id": source.id, "error": str(e)},
            )
            raise EmbeddingError(
                f"Failed to embed chunks: {e}", context={"source_id": source.id}
            ) from e

        return [
            KnowledgeNode(
                id=generate_node_id(source.id, index),
                user_id=source.user_id,
                source_id=source.id,
                chunk_index=index,
                text=chunk,
                embedding=embedding,
                importance=score_importance(chunk),
                created_at=source.created_at,
            )
            for index, (chunk, embedding) in enumerate(zip(chunks, embeddings, strict=True))
        ]

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
        """
        Ingest one document.

        Args:
            user_id: Owner user ID (required, non-blank)
            source_type: note, file or url
            title: Document title
            text: Document text; empty text persists a title-only source
            uri: Original URL
            mime_type: MIME type of an uploaded file
            metadata: Caller metadata stored on the source
            now: Ingestion time (defaults to current UTC time)
            source_id: Stable external ID; replaces any stored version of that source

        Returns:
            IngestionResult with the stored source, nodes and edges

        Raises:
            InvalidInputError: If user_id is blank or source_type is unknown
            EmbeddingError: If the embedder fails
            StoreUnavailableError: If the store fails to load or save
        """
        started = time.perf_counter()

        if not user_id or not user_id.strip():
            raise InvalidInputError("user_id is required for ingestion")
        try:
            source_type = SourceType(source_type)
        except ValueError as e:
            raise InvalidInputError(
                f"Unknown source type: {source_type}", context={"source_type": source_type}
            ) from e

        source = build_source_document(
            user_id=user_id,
            source_type=source_type,
            title=title,
            text=text,
            now=_normalize_now(now),
            uri=uri,
            mime_type=mime_type,
            metadata=metadata,
            source_id=source_id,
        )
        nodes = await self.build_nodes(source)
        edges = build_edges(source.id, nodes)
        max_sources = self.config.store.max_sources_per_user

        # Filled by apply(); the last application is the persisted one
        outcome: dict[str, Any] = {}

        def apply(snapshot: KnowledgeSnapshot) -> KnowledgeSnapshot:
            existing = snapshot.get_source(source.id)
            if existing is not None and existing.content_hash == source.content_hash:
                outcome["status"] = IngestionStatus.UNCHANGED
                outcome["evicted"] = []
                return snapshot

            outcome["status"] = (
                IngestionStatus.REPLACED if existing is not None else IngestionStatus.CREATED
            )
            upserted = _upsert_source(snapshot, source, nodes, edges)
            trimmed, evicted = apply_retention(upserted, max_sources, keep_source_id=source.id)
            outcome["evicted"] = evicted
            return trimmed

        persisted = await self.store.update(user_id, apply)

        status = outcome["status"]
        if status == IngestionStatus.UNCHANGED:
            stored_source = persisted.get_source(source.id) or source
            result = IngestionResult(
                source=stored_source,
                nodes=persisted.nodes_for_source(source.id),
                edges=persisted.edges_for_source(source.id),
                status=status,
            )
        else:
            result = IngestionResult(
                source=source,
                nodes=nodes,
                edges=edges,
                status=status,
                evicted_source_ids=outcome["evicted"],
            )
        result.processing_time_ms = (time.perf_counter() - started) * 1000

        logger.info(
            f"Ingested source ({status.value}, {len(result.nodes)} chunks)",
            extra={
                "operation": "ingest",
                "source_id": source.id,
                "source_type": source_type.value,
                "evicted": len(result.evicted_source_ids),
            },
        )
        return result

    async def ingest_note(
        self,
        user_id: str,
        title: str,
        text: str,
        tags: list[str] | None = None,
        now: datetime | None = None,
    ) -> IngestionResult:
        """Ingest a note from the note-taking UI."""
        return await self.ingest(
            user_id=user_id,
            source_type=SourceType.NOTE,
            title=title,
            text=text,
            metadata={"tags": list(tags or [])},
            now=now,
        )

    async def ingest_file(
        self,
        user_id: str,
        title: str,
        text: str,
        mime_type: str | None = None,
        size_bytes: int | None = None,
        now: datetime | None = None,
    ) -> IngestionResult:
        """Ingest the extracted text of an uploaded file."""
        metadata = {"size_bytes": size_bytes} if size_bytes is not None else {}
        return await self.ingest(
            user_id=user_id,
            source_type=SourceType.FILE,
            title=title,
            text=text,
            mime_type=mime_type,
            metadata=metadata,
            now=now,
        )

    async def ingest_url(
        self,
        user_id: str,
        title: str,
        url: str,
        text: str,
        now: datetime | None = None,
    ) -> IngestionResult:
        """Ingest the text of a fetched page."""
        return await self.ingest(
            user_id=user_id,
            source_type=SourceType.URL,
            title=title,
            text=text,
            uri=url,
            now=now,
        )

    async def ingest_html(
        self,
        user_id: str,
        url: str,
        html: str,
        title: str | None = None,
        now: datetime | None = None,
    ) -> IngestionResult:
        """
        Ingest a fetched HTML page.

        Visible text is extracted from the markup. Without an explicit title
        the page's <title> is used, falling back to the URL.
        """
        page_title = title or extract_title_from_html(html) or url
        return await self.ingest_url(
            user_id=user_id,
            title=page_title,
            url=url,
            text=extract_text_from_html(html),
            now=now,
        )

    async def ingest_transcript(
        self,
        user_id: str,
        title: str,
        segments: Iterable[tuple[str, str]],
        now: datetime | None = None,
    ) -> IngestionResult:
        """
        Ingest a finalized meeting transcript.

        Args:
            user_id: Owner user ID
            title: Meeting title
            segments: (speaker, utterance) pairs in order
            now: Ingestion time

        Returns:
            IngestionResult of a note tagged as a transcript
        """
        lines = []
        speakers: list[str] = []
        for speaker, utterance in segments:
            speaker = clean_whitespace(speaker) or "Unknown"
            utterance = clean_whitespace(utterance)
            if not utterance:
                continue
            if speaker not in speakers:
                speakers.append(speaker)
            lines.append(f"{speaker}: {utterance}")

        return await self.ingest(
            user_id=user_id,
            source_type=SourceType.NOTE,
            title=title,
            text="\n".join(lines),
            metadata={"kind": "transcript", "speakers": speakers},
            now=now,
        )
