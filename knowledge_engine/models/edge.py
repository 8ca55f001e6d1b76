"""Graph edge models."""

from enum import Enum

from pydantic import BaseModel, Field


class EdgeType(str, Enum):
    """Types of relationships between knowledge nodes."""

    # Consecutive chunks of the same source
    SOURCE = "source"


class KnowledgeEdge(BaseModel):
    """Directed edge between two knowledge nodes."""

    id: str
    source_id: str  # Source both endpoints belong to
    from_node_id: str
    to_node_id: str
    type: EdgeType = EdgeType.SOURCE
    weight: float = Field(default=1.0, ge=0.0)
