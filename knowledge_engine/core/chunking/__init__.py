"""Text chunking for ingestion."""

from knowledge_engine.core.chunking.chunker import Chunker, split_into_chunks

__all__ = ["Chunker", "split_into_chunks"]
