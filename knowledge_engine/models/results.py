"""
Result models for ingestion and retrieval operations.
"""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field

from knowledge_engine.models.edge import KnowledgeEdge
from knowledge_engine.models.node import KnowledgeNode
from knowledge_engine.models.source import SourceDocument


class IngestionStatus(str, Enum):
    """Outcome of an ingestion call."""

    CREATED = "created"  # Source id was not in the snapshot
    REPLACED = "replaced"  # Source id existed with different content
    UNCHANGED = "unchanged"  # Same content hash already stored


class IngestionResult(BaseModel):
    """
    Result of an ingestion call.

    Carries the records as they are stored after the call.
    """

    source: SourceDocument
    nodes: list[KnowledgeNode] = Field(default_factory=list)
    edges: list[KnowledgeEdge] = Field(default_factory=list)
    status: IngestionStatus = IngestionStatus.CREATED
    evicted_source_ids: list[str] = Field(
        default_factory=list,
        description="Sources removed by the retention policy during this call",
    )
    processing_time_ms: float = Field(default=0.0, ge=0)

    @property
    def chunk_count(self) -> int:
        return len(self.nodes)


class RetrievalHit(BaseModel):
    """One ranked node with its signal breakdown."""

    node: KnowledgeNode
    source: SourceDocument
    score: float = Field(..., ge=0.0, le=1.0, description="Weighted total")
    semantic: float = Field(..., ge=0.0, le=1.0)
    recency: float = Field(..., ge=0.0, le=1.0)
    importance: float = Field(..., ge=0.0, le=1.0)
    lexical: float = Field(..., ge=0.0, le=1.0)


class RetrievalResult(BaseModel):
    """Ranked hits for a query plus the formula used to rank them."""

    query: str
    hits: list[RetrievalHit] = Field(default_factory=list)
    formula: str
    generated_at: datetime
