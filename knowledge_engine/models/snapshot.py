"""
Per-user knowledge snapshot.

The snapshot is the complete {sources, nodes, edges} state of one user
and the unit of storage and of atomic update. Helpers never mutate the
snapshot in place; they return filtered copies.
"""

from datetime import UTC, datetime

from pydantic import BaseModel, Field

from knowledge_engine.models.edge import KnowledgeEdge
from knowledge_engine.models.node import KnowledgeNode
from knowledge_engine.models.source import SourceDocument


class KnowledgeSnapshot(BaseModel):
    """Complete knowledge graph state for one user."""

    sources: list[SourceDocument] = Field(default_factory=list)
    nodes: list[KnowledgeNode] = Field(default_factory=list)
    edges: list[KnowledgeEdge] = Field(default_factory=list)
    updated_at: datetime = Field(default_factory=lambda: datetime.fromtimestamp(0, UTC))

    @classmethod
    def empty(cls) -> "KnowledgeSnapshot":
        """Snapshot of a user who has never ingested anything."""
        return cls()

    def is_empty(self) -> bool:
        return not self.sources and not self.nodes and not self.edges

    def source_ids(self) -> set[str]:
        return {source.id for source in self.sources}

    def get_source(self, source_id: str) -> SourceDocument | None:
        for source in self.sources:
            if source.id == source_id:
                return source
        return None

    def nodes_for_source(self, source_id: str) -> list[KnowledgeNode]:
        """Nodes of one source, ordered by chunk index."""
        nodes = [node for node in self.nodes if node.source_id == source_id]
        return sorted(nodes, key=lambda node: node.chunk_index)

    def edges_for_source(self, source_id: str) -> list[KnowledgeEdge]:
        return [edge for edge in self.edges if edge.source_id == source_id]

    def without_source(self, source_id: str) -> "KnowledgeSnapshot":
        """
        Copy of the snapshot with a source and all its nodes and edges removed.

        Args:
            source_id: Source to drop

        Returns:
            New snapshot; unchanged copy if the source is unknown
        """
        return self.model_copy(
            update={
                "sources": [source for source in self.sources if source.id != source_id],
                "nodes": [node for node in self.nodes if node.source_id != source_id],
                "edges": [edge for edge in self.edges if edge.source_id != source_id],
            }
        )
