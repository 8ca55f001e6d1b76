"""Shared fixtures for knowledge engine tests.

Fixtures use function scope: every test gets a fresh in-memory store.
"""

import asyncio
from datetime import UTC, datetime, timedelta
from typing import Any

import pytest

from knowledge_engine.config import Config
from knowledge_engine.core.embeddings import HashingEmbedder, build_deterministic_embedding
from knowledge_engine.core.store import InMemorySnapshotAdapter, KnowledgeStore, SnapshotAdapter
from knowledge_engine.models import (
    KnowledgeNode,
    SourceDocument,
    SourceType,
    compute_content_hash,
)
from knowledge_engine.services import IngestionPipeline, KnowledgeEngine, RetrievalEngine

FIXED_NOW = datetime(2026, 3, 2, 9, 30, tzinfo=UTC)


class SlowAdapter(InMemorySnapshotAdapter):
    """In-memory adapter that yields to the event loop on every call."""

    async def read(self, user_id: str) -> dict[str, Any] | None:
        await asyncio.sleep(0)
        return await super().read(user_id)

    async def write(self, user_id: str, payload: dict[str, Any]) -> None:
        await asyncio.sleep(0)
        await super().write(user_id, payload)


class FailingAdapter(SnapshotAdapter):
    """Adapter whose backend is down."""

    async def read(self, user_id: str) -> dict[str, Any] | None:
        raise ConnectionError("backend offline")

    async def write(self, user_id: str, payload: dict[str, Any]) -> None:
        raise ConnectionError("backend offline")


def make_source(
    source_id: str,
    user_id: str = "user_1",
    text: str = "",
    created_at: datetime = FIXED_NOW,
    source_type: SourceType = SourceType.NOTE,
    title: str = "Test Source",
) -> SourceDocument:
    """Build a SourceDocument directly, bypassing the pipeline."""
    return SourceDocument(
        id=source_id,
        user_id=user_id,
        type=source_type,
        title=title,
        created_at=created_at,
        content_hash=compute_content_hash(source_type, title, text),
        text=text,
    )


def make_node(
    source_id: str,
    text: str,
    chunk_index: int = 0,
    user_id: str = "user_1",
    created_at: datetime = FIXED_NOW,
    importance: float = 0.35,
    embedding: list[float] | None = None,
) -> KnowledgeNode:
    """Build a KnowledgeNode directly, embedding its text unless a vector is given."""
    return KnowledgeNode(
        id=f"node_{source_id}_{chunk_index}",
        user_id=user_id,
        source_id=source_id,
        chunk_index=chunk_index,
        text=text,
        embedding=embedding if embedding is not None else build_deterministic_embedding(text),
        importance=importance,
        created_at=created_at,
    )


@pytest.fixture
def now() -> datetime:
    return FIXED_NOW


@pytest.fixture
def days_ago():
    """Return a helper producing FIXED_NOW minus N days."""

    def _days_ago(days: float) -> datetime:
        return FIXED_NOW - timedelta(days=days)

    return _days_ago


@pytest.fixture
def config() -> Config:
    return Config()


@pytest.fixture
def store() -> KnowledgeStore:
    return KnowledgeStore(adapter=InMemorySnapshotAdapter())


@pytest.fixture
def embedder() -> HashingEmbedder:
    return HashingEmbedder()


@pytest.fixture
def pipeline(store, embedder, config) -> IngestionPipeline:
    return IngestionPipeline(store=store, embedder=embedder, config=config)


@pytest.fixture
def retrieval(store, embedder, config) -> RetrievalEngine:
    return RetrievalEngine(store=store, embedder=embedder, config=config.retrieval)


@pytest.fixture
def engine(store, embedder, config) -> KnowledgeEngine:
    return KnowledgeEngine(store=store, embedder=embedder, config=config)


@pytest.fixture
def sprint_plan_text() -> str:
    """300-word note mentioning "deadline" exactly three times."""
    filler = (
        "the team reviewed backlog items and assigned owners for each story "
        "while discussing scope estimates and testing needs"
    ).split()
    words: list[str] = []
    while len(words) < 297:
        words.extend(filler)
    words = words[:297]
    words[10] = "deadline"
    words[150] = "deadline"
    words[280] = "deadline"
    words.extend(["final", "wrap", "up."])
    return " ".join(words)
