"""
Word-window chunking with overlap.

A fact that straddles a window boundary stays retrievable because
consecutive windows share ``overlap_words`` words.
"""

from knowledge_engine.config import ChunkingConfig
from knowledge_engine.utils.text import clean_whitespace

MIN_WORDS_PER_CHUNK = 40


def split_into_chunks(
    text: str,
    words_per_chunk: int = 120,
    overlap_words: int = 24,
    min_words_per_chunk: int = MIN_WORDS_PER_CHUNK,
) -> list[str]:
    """
    Split text into overlapping word windows.

    Args:
        text: Text to split; whitespace is collapsed first
        words_per_chunk: Window size, floored at ``min_words_per_chunk``
        overlap_words: Words shared with the previous window, clamped to
            [0, words_per_chunk - 1]
        min_words_per_chunk: Floor for the window size

    Returns:
        Chunks joined with single spaces; empty list for empty text
    """
    size = max(min_words_per_chunk, words_per_chunk)
    overlap = max(0, min(size - 1, overlap_words))
    words = clean_whitespace(text).split()

    if not words:
        return []

    stride = size - overlap
    chunks: list[str] = []
    start = 0
    while start < len(words):
        chunks.append(" ".join(words[start : start + size]))
        if start + size >= len(words):
            break
        start += stride
    return chunks


class Chunker:
    """
    Configured chunker.

    Usage:
        chunker = Chunker(ChunkingConfig(words_per_chunk=80))
        chunks = chunker.chunk("Long text...")
    """

    def __init__(self, config: ChunkingConfig | None = None):
        """
        Initialize chunker with configuration.

        Args:
            config: Optional chunking configuration. Uses defaults if not provided.
        """
        self.config = config or ChunkingConfig()

    @property
    def words_per_chunk(self) -> int:
        """Effective window size after applying the floor."""
        return max(self.config.min_words_per_chunk, self.config.words_per_chunk)

    @property
    def overlap_words(self) -> int:
        """Effective overlap after clamping below the window size."""
        return max(0, min(self.words_per_chunk - 1, self.config.overlap_words))

    def chunk(self, text: str) -> list[str]:
        """
        Split text into overlapping chunks.

        Args:
            text: Text to split

        Returns:
            List of chunk strings
        """
        return split_into_chunks(
            text,
            words_per_chunk=self.config.words_per_chunk,
            overlap_words=self.config.overlap_words,
            min_words_per_chunk=self.config.min_words_per_chunk,
        )
