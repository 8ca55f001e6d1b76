"""
Tests for RetrievalEngine.

Tests cover:
1. Empty snapshots and the reported formula
2. Exact signal weighting on crafted nodes
3. Ordering, bounds, determinism and top_k handling
4. Source listing
"""

import pytest
from conftest import make_node, make_source

from knowledge_engine.config import RetrievalConfig
from knowledge_engine.core.embeddings import Embedder, build_deterministic_embedding
from knowledge_engine.models import KnowledgeSnapshot, SourceType
from knowledge_engine.services import RetrievalEngine
from knowledge_engine.utils.exceptions import EmbeddingError, InvalidInputError

FORMULA = "semantic(0.45) + recency(0.20) + importance(0.20) + lexical(0.15)"


class BrokenEmbedder(Embedder):
    async def embed(self, text: str) -> list[float]:
        raise RuntimeError("model unavailable")

    async def get_dimension(self) -> int:
        return 8


async def _seed(store, user_id: str, sources, nodes) -> None:
    await store.save(user_id, KnowledgeSnapshot(sources=sources, nodes=nodes))


@pytest.fixture
async def ten_notes(retrieval, store) -> RetrievalEngine:
    sources = [make_source(f"source_{i:02d}") for i in range(10)]
    nodes = [make_node(f"source_{i:02d}", f"note number {i}") for i in range(10)]
    await _seed(store, "user_1", sources, nodes)
    return retrieval


@pytest.fixture
async def dated_sources(retrieval, store, days_ago) -> RetrievalEngine:
    sources = [
        make_source("source_old", text="budget figures", created_at=days_ago(9)),
        make_source(
            "source_mid",
            text="Launch checklist",
            created_at=days_ago(4),
            source_type=SourceType.FILE,
            title="Checklist.pdf",
        ),
        make_source("source_new", text="standup notes", created_at=days_ago(1)),
    ]
    await _seed(store, "user_1", sources, [])
    return retrieval


@pytest.mark.unit
@pytest.mark.asyncio
class TestRetrieveEmpty:
    """Tests for users without knowledge."""

    async def test_empty_snapshot_returns_no_hits(self, retrieval, now):
        result = await retrieval.retrieve("user_1", "deadline", now=now)

        assert result.hits == []
        assert result.query == "deadline"
        assert result.formula == FORMULA
        assert result.generated_at == now

    async def test_blank_user_returns_no_hits(self, retrieval):
        result = await retrieval.retrieve("", "deadline")
        assert result.hits == []

    async def test_formula_follows_configured_weights(self, store):
        config = RetrievalConfig.model_validate(
            {"weights": {"semantic": 0.4, "recency": 0.3, "importance": 0.2, "lexical": 0.1}}
        )
        engine = RetrievalEngine(store=store, config=config)

        assert engine.formula == (
            "semantic(0.40) + recency(0.30) + importance(0.20) + lexical(0.10)"
        )


@pytest.mark.unit
@pytest.mark.asyncio
class TestRetrieveScoring:
    """Tests for the ranking formula applied to stored nodes."""

    async def test_exact_weighted_scores(self, retrieval, store, now, days_ago):
        query = "deadline friday"
        query_embedding = build_deterministic_embedding(query)
        best = make_node(
            "source_note_best",
            "deadline friday review",
            importance=0.5,
            embedding=query_embedding,
        )
        worst = make_node(
            "source_note_worst",
            "banana bread",
            created_at=days_ago(21),
            importance=0.35,
            embedding=[-value for value in query_embedding],
        )
        await _seed(
            store,
            "user_1",
            [make_source("source_note_best"), make_source("source_note_worst")],
            [worst, best],
        )

        result = await retrieval.retrieve("user_1", query, now=now)

        assert [hit.node.id for hit in result.hits] == [best.id, worst.id]
        top, bottom = result.hits
        assert top.score == pytest.approx(0.90)
        assert (top.semantic, top.recency, top.importance, top.lexical) == pytest.approx(
            (1.0, 1.0, 0.5, 1.0)
        )
        assert bottom.score == pytest.approx(0.17)
        assert (bottom.semantic, bottom.recency, bottom.importance, bottom.lexical) == (
            pytest.approx((0.0, 0.5, 0.35, 0.0))
        )

    async def test_deadline_note_ranks_first(self, engine, sprint_plan_text, now):
        sprint = await engine.ingest("user_1", "note", "Sprint Plan", sprint_plan_text, now=now)
        await engine.ingest("user_1", "note", "Lunch", "Lunch menu options for the office.", now=now)

        result = await engine.retrieve("user_1", "deadline", now=now)

        assert result.hits[0].source.id == sprint.source.id
        assert result.hits[0].lexical == pytest.approx(1.0)

    async def test_newer_node_outranks_identical_older_node(self, retrieval, store, now, days_ago):
        text = "quarterly budget review"
        await _seed(
            store,
            "user_1",
            [make_source("source_note_old"), make_source("source_note_new")],
            [
                make_node("source_note_old", text, created_at=days_ago(30)),
                make_node("source_note_new", text, created_at=days_ago(1)),
            ],
        )

        result = await retrieval.retrieve("user_1", "budget", now=now)

        assert [hit.node.source_id for hit in result.hits] == [
            "source_note_new",
            "source_note_old",
        ]
        assert result.hits[0].recency > result.hits[1].recency

    async def test_scores_bounded_and_sorted(self, engine, sprint_plan_text, now, days_ago):
        await engine.ingest("user_1", "note", "Sprint Plan", sprint_plan_text, now=days_ago(40))
        await engine.ingest("user_1", "url", "Docs", "API reference for search", now=now)
        await engine.ingest("user_1", "file", "Risk log", "Critical risk: vendor launch slip.", now=now)

        result = await engine.retrieve("user_1", "launch risk deadline", top_k=50, now=now)

        scores = [hit.score for hit in result.hits]
        assert scores == sorted(scores, reverse=True)
        for hit in result.hits:
            for value in (hit.score, hit.semantic, hit.recency, hit.importance, hit.lexical):
                assert 0.0 <= value <= 1.0

    async def test_repeated_queries_are_identical(self, engine, sprint_plan_text, now):
        await engine.ingest("user_1", "note", "Sprint Plan", sprint_plan_text, now=now)
        await engine.ingest("user_1", "note", "Other", "deadline moved again", now=now)

        first = await engine.retrieve("user_1", "deadline", now=now)
        second = await engine.retrieve("user_1", "deadline", now=now)

        assert first == second

    async def test_equal_scores_ordered_by_node_id(self, retrieval, store, now):
        await _seed(
            store,
            "user_1",
            [make_source("source_b"), make_source("source_a")],
            [make_node("source_b", "same text"), make_node("source_a", "same text")],
        )

        result = await retrieval.retrieve("user_1", "same", now=now)

        assert result.hits[0].score == result.hits[1].score
        assert [hit.node.id for hit in result.hits] == ["node_source_a_0", "node_source_b_0"]

    async def test_query_without_tokens_scores_zero_lexical(self, engine, now):
        await engine.ingest("user_1", "note", "Plan", "ship the beta", now=now)

        result = await engine.retrieve("user_1", "?!", now=now)

        assert len(result.hits) == 1
        assert result.hits[0].lexical == 0.0

    async def test_orphan_nodes_are_skipped(self, retrieval, store, now):
        await _seed(
            store,
            "user_1",
            [make_source("source_kept")],
            [make_node("source_kept", "kept text"), make_node("source_gone", "orphan text")],
        )

        result = await retrieval.retrieve("user_1", "text", now=now)

        assert [hit.node.source_id for hit in result.hits] == ["source_kept"]

    async def test_query_embedding_failure(self, store):
        engine = RetrievalEngine(store=store, embedder=BrokenEmbedder())

        with pytest.raises(EmbeddingError):
            await engine.retrieve("user_1", "deadline")


@pytest.mark.unit
@pytest.mark.asyncio
class TestRetrieveTopK:
    """Tests for result limits."""

    async def test_default_top_k(self, ten_notes, now):
        result = await ten_notes.retrieve("user_1", "note", now=now)
        assert len(result.hits) == 6

    async def test_explicit_top_k(self, ten_notes, now):
        result = await ten_notes.retrieve("user_1", "note", top_k=3, now=now)
        assert len(result.hits) == 3

    @pytest.mark.parametrize("top_k", [0, -4])
    async def test_non_positive_top_k_returns_one(self, ten_notes, now, top_k):
        result = await ten_notes.retrieve("user_1", "note", top_k=top_k, now=now)
        assert len(result.hits) == 1

    async def test_top_k_larger_than_corpus(self, ten_notes, now):
        result = await ten_notes.retrieve("user_1", "note", top_k=100, now=now)
        assert len(result.hits) == 10


@pytest.mark.unit
@pytest.mark.asyncio
class TestSearchSources:
    """Tests for source listing."""

    async def test_newest_first(self, dated_sources):
        sources = await dated_sources.search_sources("user_1")
        assert [source.id for source in sources] == ["source_new", "source_mid", "source_old"]

    async def test_term_matches_text_case_insensitively(self, dated_sources):
        sources = await dated_sources.search_sources("user_1", term="LAUNCH")
        assert [source.id for source in sources] == ["source_mid"]

    async def test_term_matches_title(self, dated_sources):
        sources = await dated_sources.search_sources("user_1", term="checklist.pdf")
        assert [source.id for source in sources] == ["source_mid"]

    async def test_type_filter(self, dated_sources):
        notes = await dated_sources.search_sources("user_1", source_type="note")
        assert [source.id for source in notes] == ["source_new", "source_old"]

        everything = await dated_sources.search_sources("user_1", source_type="all")
        assert len(everything) == 3

    async def test_unknown_type_filter_rejected(self, dated_sources):
        with pytest.raises(InvalidInputError):
            await dated_sources.search_sources("user_1", source_type="podcast")

    async def test_unknown_user(self, dated_sources):
        assert await dated_sources.search_sources("user_2") == []
