"""
Knowledge Engine - per-user knowledge ingestion and ranked retrieval.

Converts free-form text into a per-user graph of embedded chunks and
serves ranked context snippets back to callers, entirely in-process.
"""

__version__ = "0.1.0"
