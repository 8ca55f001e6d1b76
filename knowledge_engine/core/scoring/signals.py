"""
Retrieval signals and the weighted ranking total.

Each signal is a named function returning a value in [0, 1], so the
heuristics and the weights can be tuned independently of the engine.
"""

from datetime import UTC, datetime

from knowledge_engine.config import RetrievalWeights
from knowledge_engine.core.embeddings.hashing import cosine_similarity
from knowledge_engine.utils.text import tokenize

SECONDS_PER_DAY = 24 * 60 * 60
DEFAULT_WEIGHTS = RetrievalWeights()


def clamp(value: float, low: float = 0.0, high: float = 1.0) -> float:
    return max(low, min(high, value))


def _as_utc(value: datetime) -> datetime:
    # Naive timestamps are treated as UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


def semantic_score(query_embedding: list[float], node_embedding: list[float]) -> float:
    """Cosine similarity remapped from [-1, 1] to [0, 1]."""
    return clamp((cosine_similarity(query_embedding, node_embedding) + 1.0) / 2.0)


def recency_score(created_at: datetime, now: datetime, half_life_days: float = 21.0) -> float:
    """
    Hyperbolic freshness decay: 1 / (1 + age_days / half_life_days).

    A node created at (or after) ``now`` scores 1; the score halves at
    ``half_life_days`` and approaches 0 without reaching it.

    Args:
        created_at: Node creation time
        now: Reference time
        half_life_days: Age at which the score is 0.5

    Returns:
        Recency in (0, 1]
    """
    age_seconds = max(0.0, (_as_utc(now) - _as_utc(created_at)).total_seconds())
    age_days = age_seconds / SECONDS_PER_DAY
    return clamp(1.0 / (1.0 + age_days / half_life_days))


def lexical_score(
    query: str,
    node_text: str,
    phrase_boost: float = 0.2,
    min_token_length: int = 2,
) -> float:
    """
    Literal overlap between query and node text.

    Fraction of distinct query tokens present in the node's tokens, plus
    ``phrase_boost`` when the whole query appears in the node text
    (case-insensitive). A query without valid tokens scores 0.

    Args:
        query: Raw query string
        node_text: Chunk text
        phrase_boost: Bonus for a verbatim query match
        min_token_length: Shortest token that counts

    Returns:
        Lexical score in [0, 1]
    """
    query_tokens = set(tokenize(query, min_length=min_token_length))
    if not query_tokens:
        return 0.0

    node_tokens = set(tokenize(node_text, min_length=min_token_length))
    overlap_ratio = len(query_tokens & node_tokens) / len(query_tokens)

    phrase = query.strip().lower()
    boost = phrase_boost if phrase and phrase in node_text.lower() else 0.0
    return clamp(overlap_ratio + boost)


def weighted_total(
    semantic: float,
    recency: float,
    importance: float,
    lexical: float,
    weights: RetrievalWeights = DEFAULT_WEIGHTS,
) -> float:
    """
    Combine the four signals into the ranking score.

    Returns:
        Weighted sum clamped to [0, 1] and rounded to 4 decimals
    """
    total = (
        semantic * weights.semantic
        + recency * weights.recency
        + importance * weights.importance
        + lexical * weights.lexical
    )
    return round(clamp(total), 4)
