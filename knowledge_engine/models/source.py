"""
Source document model.

A source is one ingested artifact (note, uploaded file, fetched page).
Its identity is derived from a hash of its type, title and text, so
re-ingesting identical content lands on the same record.
"""

import hashlib
from datetime import UTC, datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class SourceType(str, Enum):
    """Kind of artifact a source was ingested from."""

    NOTE = "note"
    FILE = "file"
    URL = "url"


class SourceDocument(BaseModel):
    """
    Ingested artifact with its normalized full text.

    Nodes reference their source through ``source_id``; a source may have
    zero nodes when it was ingested with empty text (title-only artifact).
    """

    id: str = Field(..., description="Deterministic source ID (source_<type>_<hash>)")
    user_id: str = Field(..., description="Owner user ID")
    type: SourceType = Field(..., description="Source type")
    title: str = Field(..., description="Normalized title")
    uri: str | None = Field(default=None, description="Original URL if applicable")
    mime_type: str | None = Field(default=None, description="MIME type for uploaded files")
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    content_hash: str = Field(..., description="SHA256 over (type, title, text)")
    text: str = Field(default="", description="Normalized full text")
    metadata: dict[str, Any] = Field(default_factory=dict)

    @property
    def content_preview(self) -> str:
        """First 200 characters of the text."""
        return self.text[:200]

    def matches(self, term: str) -> bool:
        """
        Case-insensitive substring match against title, text and uri.

        Args:
            term: Lower-cased search term

        Returns:
            True if any field contains the term
        """
        if self.uri and term in self.uri.lower():
            return True
        return term in self.title.lower() or term in self.text.lower()


def compute_content_hash(source_type: SourceType | str, title: str, text: str) -> str:
    """
    Compute SHA256 hash of a source's identifying content.

    The hash is prefixed with "sha256:" for easy identification of the algorithm used.

    Args:
        source_type: Source type
        title: Normalized title
        text: Normalized text

    Returns:
        Hash string in format "sha256:hexdigest"
    """
    type_value = source_type.value if isinstance(source_type, SourceType) else source_type
    payload = f"{type_value}:{title}:{text}"
    hash_bytes = hashlib.sha256(payload.encode("utf-8")).hexdigest()
    return f"sha256:{hash_bytes}"
