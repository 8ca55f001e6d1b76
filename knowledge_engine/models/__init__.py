"""
Data models for the knowledge engine.

Core models:
- SourceDocument, SourceType: Ingested artifacts
- KnowledgeNode: Embedded chunk of a source
- KnowledgeEdge, EdgeType: Links between consecutive chunks
- KnowledgeSnapshot: Per-user {sources, nodes, edges} state
- IngestionResult, IngestionStatus: Ingestion results
- RetrievalHit, RetrievalResult: Retrieval results
"""

from knowledge_engine.models.edge import EdgeType, KnowledgeEdge
from knowledge_engine.models.node import KnowledgeNode
from knowledge_engine.models.results import (
    IngestionResult,
    IngestionStatus,
    RetrievalHit,
    RetrievalResult,
)
from knowledge_engine.models.snapshot import KnowledgeSnapshot
from knowledge_engine.models.source import SourceDocument, SourceType, compute_content_hash

__all__ = [
    # Source models
    "SourceDocument",
    "SourceType",
    "compute_content_hash",
    # Graph models
    "KnowledgeNode",
    "KnowledgeEdge",
    "EdgeType",
    "KnowledgeSnapshot",
    # Result models
    "IngestionResult",
    "IngestionStatus",
    "RetrievalHit",
    "RetrievalResult",
]
