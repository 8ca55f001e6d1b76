"""
Configuration for the knowledge engine.

Supports loading from:
1. Environment variables (highest priority)
2. YAML config file
3. Default values (fallback)
"""

import os
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, model_validator


class ChunkingConfig(BaseModel):
    """Word-window chunking configuration."""

    words_per_chunk: int = 120
    overlap_words: int = 24

    # Floor applied to words_per_chunk
    min_words_per_chunk: int = 40


class EmbedderConfig(BaseModel):
    """Embedder configuration."""

    provider: str = "hashing"  # hashing
    dimension: int = 256


class RetrievalWeights(BaseModel):
    """Weights of the four retrieval signals. Must sum to 1."""

    semantic: float = Field(default=0.45, ge=0.0, le=1.0)
    recency: float = Field(default=0.20, ge=0.0, le=1.0)
    importance: float = Field(default=0.20, ge=0.0, le=1.0)
    lexical: float = Field(default=0.15, ge=0.0, le=1.0)

    @model_validator(mode="after")
    def _check_sum(self) -> "RetrievalWeights":
        total = self.semantic + self.recency + self.importance + self.lexical
        if abs(total - 1.0) > 1e-6:
            raise ValueError(f"Retrieval weights must sum to 1.0, got {total:.4f}")
        return self

    @property
    def formula(self) -> str:
        """Human-readable ranking formula reported with every retrieval."""
        return (
            f"semantic({self.semantic:.2f}) + recency({self.recency:.2f}) + "
            f"importance({self.importance:.2f}) + lexical({self.lexical:.2f})"
        )


class RetrievalConfig(BaseModel):
    """Retrieval ranking configuration."""

    top_k: int = 6
    # Age in days at which recency drops to 0.5
    recency_half_life_days: float = 21.0
    # Flat lexical bonus when the whole query appears verbatim
    phrase_boost: float = 0.2
    min_token_length: int = 2
    weights: RetrievalWeights = Field(default_factory=RetrievalWeights)


class StoreConfig(BaseModel):
    """Snapshot store configuration."""

    backend: str = "memory"  # memory, sqlite
    db_path: str = "data/knowledge.db"
    # Oldest sources beyond this count are evicted on ingestion; None disables
    max_sources_per_user: int | None = Field(default=500, ge=1)


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = "INFO"
    log_to_file: bool = False
    log_dir: str = "logs"
    file_rotation: str = "10 MB"
    file_retention: str = "7 days"
    compression: str = "zip"
    serialize: bool = True


class Config(BaseModel):
    """Main configuration."""

    chunking: ChunkingConfig = Field(default_factory=ChunkingConfig)
    embedder: EmbedderConfig = Field(default_factory=EmbedderConfig)
    retrieval: RetrievalConfig = Field(default_factory=RetrievalConfig)
    store: StoreConfig = Field(default_factory=StoreConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def from_env(cls, env_file: str | Path | None = None) -> "Config":
        """
        Load configuration from environment variables.

        Priority: .env file -> system environment variables -> defaults

        Args:
            env_file: Optional path to .env file (default: .env in working directory)

        Returns:
            Config instance

        Environment variables:
            KG_WORDS_PER_CHUNK: Words per chunk
            KG_OVERLAP_WORDS: Words shared by consecutive chunks
            KG_EMBEDDER_PROVIDER: Embedder provider (hashing)
            KG_EMBEDDER_DIMENSION: Embedding dimension
            KG_RETRIEVAL_TOP_K: Default number of hits
            KG_RECENCY_HALF_LIFE_DAYS: Recency half-life in days
            KG_STORE_BACKEND: Store backend (memory, sqlite)
            KG_STORE_DB_PATH: SQLite database path
            KG_MAX_SOURCES_PER_USER: Retention limit (0 disables)
            KG_LOG_LEVEL: Log level
        """
        if env_file:
            load_dotenv(env_file)
        elif Path(".env").exists():
            load_dotenv()

        def get_env(key: str, default: Any = None) -> Any:
            """Get environment variable with type conversion."""
            value = os.getenv(key)
            if value is None or value == "":
                return default
            if isinstance(default, bool):
                return str(value).lower() in ("true", "1", "yes")
            if isinstance(default, int):
                return int(value)
            if isinstance(default, float):
                return float(value)
            return value

        max_sources = get_env("KG_MAX_SOURCES_PER_USER", 500)

        return cls(
            chunking=ChunkingConfig(
                words_per_chunk=get_env("KG_WORDS_PER_CHUNK", 120),
                overlap_words=get_env("KG_OVERLAP_WORDS", 24),
            ),
            embedder=EmbedderConfig(
                provider=get_env("KG_EMBEDDER_PROVIDER", "hashing"),
                dimension=get_env("KG_EMBEDDER_DIMENSION", 256),
            ),
            retrieval=RetrievalConfig(
                top_k=get_env("KG_RETRIEVAL_TOP_K", 6),
                recency_half_life_days=get_env("KG_RECENCY_HALF_LIFE_DAYS", 21.0),
            ),
            store=StoreConfig(
                backend=get_env("KG_STORE_BACKEND", "memory"),
                db_path=get_env("KG_STORE_DB_PATH", "data/knowledge.db"),
                max_sources_per_user=max_sources if max_sources > 0 else None,
            ),
            logging=LoggingConfig(
                level=get_env("KG_LOG_LEVEL", "INFO"),
                log_to_file=get_env("KG_LOG_TO_FILE", False),
                log_dir=get_env("KG_LOG_DIR", "logs"),
                file_rotation=get_env("KG_LOG_FILE_ROTATION", "10 MB"),
                file_retention=get_env("KG_LOG_FILE_RETENTION", "7 days"),
                compression=get_env("KG_LOG_COMPRESSION", "zip"),
                serialize=get_env("KG_LOG_SERIALIZE", True),
            ),
        )

    @classmethod
    def from_yaml(cls, yaml_path: str | Path) -> "Config":
        """
        Load configuration from YAML file.

        Args:
            yaml_path: Path to YAML configuration file

        Returns:
            Config instance

        Raises:
            FileNotFoundError: If YAML file doesn't exist
            yaml.YAMLError: If YAML is invalid
        """
        yaml_path = Path(yaml_path)
        if not yaml_path.exists():
            raise FileNotFoundError(f"Config file not found: {yaml_path}")

        with open(yaml_path) as f:
            data = yaml.safe_load(f) or {}

        return cls(**data)

    @classmethod
    def from_env_or_yaml(
        cls, yaml_path: str | Path | None = None, env_file: str | Path | None = None
    ) -> "Config":
        """
        Load configuration with priority: env vars > YAML > defaults.

        Args:
            yaml_path: Optional path to YAML config
            env_file: Optional path to .env file

        Returns:
            Config instance
        """
        if yaml_path and Path(yaml_path).exists():
            with open(yaml_path) as f:
                config_dict = yaml.safe_load(f) or {}
        else:
            config_dict = {}

        env_config = cls.from_env(env_file=env_file)

        final_dict = {**config_dict}

        # Apply env overrides (non-default sections only)
        default = cls()
        for section in ("chunking", "embedder", "retrieval", "store", "logging"):
            env_section = getattr(env_config, section)
            if env_section != getattr(default, section):
                final_dict[section] = env_section.model_dump()

        return cls(**final_dict) if final_dict else env_config


# Default config instance
default_config = Config()
