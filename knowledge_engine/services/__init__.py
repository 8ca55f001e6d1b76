"""
Services for the knowledge engine.

- IngestionPipeline: text -> sources, nodes, edges
- RetrievalEngine: query -> ranked hits
- KnowledgeEngine: configured facade over both
"""

from knowledge_engine.services.ingestion import IngestionPipeline
from knowledge_engine.services.knowledge_engine import KnowledgeEngine
from knowledge_engine.services.retrieval import RetrievalEngine

__all__ = [
    "IngestionPipeline",
    "RetrievalEngine",
    "KnowledgeEngine",
]
