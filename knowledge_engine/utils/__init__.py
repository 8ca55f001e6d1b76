"""Utility modules for the knowledge engine."""

from knowledge_engine.utils.exceptions import (
    ConfigurationError,
    EmbeddingError,
    InvalidInputError,
    KnowledgeEngineError,
    StoreError,
    StoreUnavailableError,
)
from knowledge_engine.utils.id_generator import (
    generate_edge_id,
    generate_node_id,
    generate_source_id,
)
from knowledge_engine.utils.logger import get_logger, setup_logging
from knowledge_engine.utils.text import (
    clean_whitespace,
    extract_text_from_html,
    extract_title_from_html,
    tokenize,
)

__all__ = [
    # Logging
    "get_logger",
    "setup_logging",
    # ID Generators
    "generate_source_id",
    "generate_node_id",
    "generate_edge_id",
    # Text
    "clean_whitespace",
    "tokenize",
    "extract_text_from_html",
    "extract_title_from_html",
    # Exceptions
    "KnowledgeEngineError",
    "InvalidInputError",
    "StoreError",
    "StoreUnavailableError",
    "ConfigurationError",
    "EmbeddingError",
]
