"""
Text normalization helpers shared by ingestion, embedding and scoring.

Includes a small HTML-to-text extractor for fetched pages.
"""

import re

_WHITESPACE_RE = re.compile(r"\s+")
_TOKEN_RE = re.compile(r"[a-z0-9]+")

_BLOCK_RE = re.compile(r"<(script|style|noscript)\b[^>]*>.*?</\1\s*>", re.IGNORECASE | re.DOTALL)
_TAG_RE = re.compile(r"<[^>]+>")
_TITLE_RE = re.compile(r"<title[^>]*>(.*?)</title\s*>", re.IGNORECASE | re.DOTALL)

# Only the entities fetched pages commonly carry in body text
_ENTITIES = {
    "&nbsp;": " ",
    "&amp;": "&",
    "&quot;": '"',
    "&#39;": "'",
}


def clean_whitespace(value: str | None) -> str:
    """Collapse every whitespace run to a single space and strip the ends."""
    if not value:
        return ""
    return _WHITESPACE_RE.sub(" ", value).strip()


def tokenize(value: str, min_length: int = 1) -> list[str]:
    """
    Split text into lower-cased alphanumeric tokens.

    Args:
        value: Text to tokenize
        min_length: Drop tokens shorter than this

    Returns:
        Tokens in order of appearance (duplicates kept)
    """
    if not value:
        return []
    return [token for token in _TOKEN_RE.findall(value.lower()) if len(token) >= min_length]


def _decode_entities(value: str) -> str:
    for entity, replacement in _ENTITIES.items():
        value = value.replace(entity, replacement)
    return value


def extract_text_from_html(html: str) -> str:
    """
    Extract visible text from an HTML page.

    Script, style and noscript blocks are dropped, remaining tags are
    replaced by spaces and common entities are decoded.
    """
    if not html:
        return ""
    without_blocks = _BLOCK_RE.sub(" ", html)
    text = _TAG_RE.sub(" ", without_blocks)
    return clean_whitespace(_decode_entities(text))


def extract_title_from_html(html: str) -> str | None:
    """Return the normalized <title> of an HTML page, or None when absent or blank."""
    if not html:
        return None
    match = _TITLE_RE.search(html)
    if not match:
        return None
    title = clean_whitespace(_decode_entities(match.group(1)))
    return title or None
