"""
Heuristic importance of a chunk on its own.

score = 0.35 base
      + 0.09 per signal-term occurrence (capped at 0.40)
      + sentence_count / 20 (capped at 0.20)

clamped to [0, 1] and rounded to 4 decimals.
"""

import re

BASE_IMPORTANCE = 0.35
SIGNAL_TERM_WEIGHT = 0.09
SIGNAL_TERM_CAP = 0.4
SENTENCE_DIVISOR = 20.0
SENTENCE_CAP = 0.2

SIGNAL_TERMS = ("must", "critical", "decision", "deadline", "risk", "launch", "priority")

# Whole words plus common inflections: "deadlines", "risky" and "launched" count, "mustard" does not
_SIGNAL_RE = re.compile(
    r"\b(?:" + "|".join(SIGNAL_TERMS) + r")(?:s|es|ed|ing|y|ly)?\b", re.IGNORECASE
)
_SENTENCE_SPLIT_RE = re.compile(r"(?<=[.!?])\s+")


def count_signal_terms(text: str) -> int:
    """Number of signal-term occurrences in text."""
    if not text:
        return 0
    return len(_SIGNAL_RE.findall(text))


def count_sentences(text: str) -> int:
    """Number of non-blank sentences, split on terminal punctuation."""
    if not text or not text.strip():
        return 0
    return sum(1 for part in _SENTENCE_SPLIT_RE.split(text) if part.strip())


def score_importance(text: str) -> float:
    """
    Score a chunk's standalone significance.

    Monotonic in the number of signal terms; never leaves [0, 1].

    Args:
        text: Chunk text

    Returns:
        Importance in [0, 1]
    """
    signal_bonus = min(SIGNAL_TERM_CAP, count_signal_terms(text) * SIGNAL_TERM_WEIGHT)
    sentence_bonus = min(SENTENCE_CAP, count_sentences(text) / SENTENCE_DIVISOR)
    score = BASE_IMPORTANCE + signal_bonus + sentence_bonus
    return round(max(0.0, min(1.0, score)), 4)
