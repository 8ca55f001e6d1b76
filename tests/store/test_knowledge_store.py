"""
Tests for KnowledgeStore.

Tests cover:
1. Loading unknown users and persisting updates
2. Per-user serialization of concurrent updates
3. Failure translation into StoreUnavailableError
"""

import asyncio

import pytest
from conftest import FailingAdapter, SlowAdapter, make_node, make_source

from knowledge_engine.core.store import InMemorySnapshotAdapter, KnowledgeStore
from knowledge_engine.models import KnowledgeSnapshot
from knowledge_engine.utils.exceptions import StoreUnavailableError


def _add_source(source_id: str):
    def apply(snapshot: KnowledgeSnapshot) -> KnowledgeSnapshot:
        return snapshot.model_copy(
            update={"sources": [*snapshot.sources, make_source(source_id)]}
        )

    return apply


@pytest.mark.unit
@pytest.mark.asyncio
class TestKnowledgeStore:
    """Tests for load, save and update."""

    async def test_unknown_user_loads_empty_snapshot(self, store):
        snapshot = await store.load("nobody")
        assert snapshot.is_empty()

    async def test_default_adapter_is_in_memory(self):
        assert isinstance(KnowledgeStore().adapter, InMemorySnapshotAdapter)

    async def test_update_persists(self, store):
        await store.update("user_1", _add_source("source_note_a"))

        snapshot = await store.load("user_1")
        assert snapshot.source_ids() == {"source_note_a"}

    async def test_update_round_trips_nodes(self, store):
        node = make_node("source_note_a", "deadline on friday")

        def apply(snapshot):
            return snapshot.model_copy(
                update={"sources": [make_source("source_note_a")], "nodes": [node]}
            )

        await store.update("user_1", apply)
        loaded = await store.load("user_1")

        assert loaded.nodes == [node]

    async def test_users_are_isolated(self, store):
        await store.update("user_1", _add_source("source_note_a"))

        assert (await store.load("user_2")).is_empty()

    async def test_save_stamps_updated_at(self, store):
        empty = KnowledgeSnapshot.empty()
        saved = await store.save("user_1", empty)

        assert saved.updated_at > empty.updated_at
        assert (await store.load("user_1")).updated_at == saved.updated_at

    async def test_returned_snapshot_is_not_shared_state(self, store):
        await store.update("user_1", _add_source("source_note_a"))

        first = await store.load("user_1")
        first.sources.clear()

        assert len((await store.load("user_1")).sources) == 1

    async def test_concurrent_updates_do_not_lose_writes(self):
        store = KnowledgeStore(adapter=SlowAdapter())

        await asyncio.gather(
            *(store.update("user_1", _add_source(f"source_note_{i}")) for i in range(20))
        )

        snapshot = await store.load("user_1")
        assert snapshot.source_ids() == {f"source_note_{i}" for i in range(20)}

    async def test_failing_fn_leaves_snapshot_untouched(self, store):
        await store.update("user_1", _add_source("source_note_a"))

        def explode(snapshot):
            raise ValueError("boom")

        with pytest.raises(ValueError):
            await store.update("user_1", explode)

        assert (await store.load("user_1")).source_ids() == {"source_note_a"}
        # Lock was released
        await store.update("user_1", _add_source("source_note_b"))


@pytest.mark.unit
@pytest.mark.asyncio
class TestKnowledgeStoreFailures:
    """Tests for backend failure handling."""

    async def test_load_failure_raises_store_unavailable(self):
        store = KnowledgeStore(adapter=FailingAdapter())

        with pytest.raises(StoreUnavailableError) as exc_info:
            await store.load("user_1")

        assert exc_info.value.context["user_id"] == "user_1"
        assert isinstance(exc_info.value.__cause__, ConnectionError)

    async def test_update_failure_raises_store_unavailable(self):
        store = KnowledgeStore(adapter=FailingAdapter())

        with pytest.raises(StoreUnavailableError):
            await store.update("user_1", _add_source("source_note_a"))

    async def test_corrupt_payload_raises_store_unavailable(self):
        adapter = InMemorySnapshotAdapter()
        await adapter.write("user_1", {"sources": [{"id": "missing fields"}]})
        store = KnowledgeStore(adapter=adapter)

        with pytest.raises(StoreUnavailableError):
            await store.load("user_1")
