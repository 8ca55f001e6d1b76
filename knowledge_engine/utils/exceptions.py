"""
Custom exception hierarchy for the knowledge engine.

Provides structured error types for callers of ingestion and retrieval.
All exceptions inherit from KnowledgeEngineError for easy catching.
"""


class KnowledgeEngineError(Exception):
    """
    Base exception for all knowledge engine errors.
    All custom exceptions should inherit from this class.
    """

    def __init__(self, message: str, context: dict | None = None):
        """
        Initialize knowledge engine error.
        Args:
            message: Error message
            context: Optional context dictionary with additional error details
        """
        super().__init__(message)
        self.message = message
        self.context = context or {}


class InvalidInputError(KnowledgeEngineError):
    """
    Invalid caller input.
    Raised when a required argument (such as the user id) is missing or blank.
    Never retried internally.
    """

    pass


class StoreError(KnowledgeEngineError):
    """
    Base exception for snapshot store operations.
    """

    pass


class StoreUnavailableError(StoreError):
    """
    Snapshot store failures.
    Raised when the injected adapter cannot load or save a snapshot,
    or when a stored snapshot cannot be decoded.
    """

    pass


class ConfigurationError(KnowledgeEngineError):
    """
    Configuration errors.
    Raised when configuration is invalid or names an unknown backend.
    """

    pass


class EmbeddingError(KnowledgeEngineError):
    """
    Embedding generation errors.
    Raised when the embedder fails to produce a vector.
    """

    pass
