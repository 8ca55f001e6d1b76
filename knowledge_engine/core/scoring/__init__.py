"""Heuristic scoring for ingestion (importance) and retrieval (ranking signals)."""

from knowledge_engine.core.scoring.importance import (
    count_sentences,
    count_signal_terms,
    score_importance,
)
from knowledge_engine.core.scoring.signals import (
    lexical_score,
    recency_score,
    semantic_score,
    weighted_total,
)

__all__ = [
    "score_importance",
    "count_signal_terms",
    "count_sentences",
    "semantic_score",
    "recency_score",
    "lexical_score",
    "weighted_total",
]
