"""
Tests for content-derived ID generation.
"""

import pytest

from knowledge_engine.models import SourceType, compute_content_hash
from knowledge_engine.utils.id_generator import (
    generate_edge_id,
    generate_node_id,
    generate_source_id,
)


@pytest.mark.unit
class TestIdGenerator:
    """Tests for id generation utilities."""

    def test_source_id_format(self):
        content_hash = "sha256:" + "ab" * 32
        assert generate_source_id("note", content_hash) == "source_note_abababababababab"

    def test_source_id_without_prefix(self):
        assert generate_source_id("url", "0123456789abcdef0123") == "source_url_0123456789abcdef"

    def test_source_id_is_deterministic(self):
        content_hash = compute_content_hash(SourceType.FILE, "Report", "body")
        assert generate_source_id("file", content_hash) == generate_source_id("file", content_hash)

    def test_different_content_different_id(self):
        first = compute_content_hash(SourceType.NOTE, "A", "x")
        second = compute_content_hash(SourceType.NOTE, "A", "y")
        assert generate_source_id("note", first) != generate_source_id("note", second)

    def test_node_id(self):
        assert generate_node_id("source_note_abc", 3) == "node_source_note_abc_3"

    def test_edge_id(self):
        assert generate_edge_id("source_note_abc", 0) == "edge_source_note_abc_0"
