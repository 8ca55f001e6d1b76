"""Knowledge node model: one embedded chunk of a source."""

from datetime import UTC, datetime

from pydantic import BaseModel, Field


class KnowledgeNode(BaseModel):
    """
    Chunk of a source document, embedded and scored for retrieval.

    Nodes of one source have contiguous ``chunk_index`` values starting at 0.
    """

    id: str = Field(..., description="Node ID derived from source ID and chunk index")
    user_id: str = Field(..., description="Owner user ID")
    source_id: str = Field(..., description="Parent source ID")
    chunk_index: int = Field(..., ge=0, description="Zero-based index within the source")
    text: str = Field(..., description="Chunk text")
    embedding: list[float] = Field(default_factory=list, description="Fixed-length vector")
    importance: float = Field(default=0.35, ge=0.0, le=1.0)
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
