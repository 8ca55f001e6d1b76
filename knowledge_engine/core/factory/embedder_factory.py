"""
Factory for creating embedder providers.
"""

from knowledge_engine.config import EmbedderConfig
from knowledge_engine.core.embeddings.base import Embedder
from knowledge_engine.core.embeddings.hashing import HashingEmbedder
from knowledge_engine.utils.exceptions import ConfigurationError


class EmbedderFactory:
    """Factory for creating embedder providers from configuration."""

    @staticmethod
    def create(config: EmbedderConfig) -> Embedder:
        """
        Create embedder from configuration.

        Args:
            config: Embedder configuration

        Returns:
            Embedder instance

        Raises:
            ConfigurationError: If provider is not supported
        """
        if config.provider == "hashing":
            return HashingEmbedder(dimension=config.dimension)
        raise ConfigurationError(
            f"Unsupported embedder provider: {config.provider}",
            context={"provider": config.provider},
        )
