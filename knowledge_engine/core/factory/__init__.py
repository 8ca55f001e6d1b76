"""
Factory modules for creating knowledge engine components.

Provides modular factories for the Embedder and the snapshot Store.
"""

from knowledge_engine.core.factory.embedder_factory import EmbedderFactory
from knowledge_engine.core.factory.store_factory import StoreFactory

__all__ = [
    "EmbedderFactory",
    "StoreFactory",
]
