"""Keyword relevance scoring for document chunks."""

import re

from backend.app.docs.errors import InvalidArgumentError, require_str

# Words of this length or shorter are dropped from queries ("a", "of", "is", ...)
MIN_WORD_LENGTH = 3

PHRASE_BONUS_PER_WORD = 2


def tokenize_query(query: str) -> list[str]:
    """Lower-case the query, split on whitespace and keep words longer than 2 chars."""
    return [word for word in require_str(query, "query").lower().split() if len(word) >= MIN_WORD_LENGTH]


def score_chunk(chunk_text: str, query_words: list[str]) -> int:
    """Score a chunk against tokenized query words.

    Scoring strategy:
    - Each query word adds its count of case-insensitive, non-overlapping
      occurrences in the chunk (substring matches, so "report" also hits
      "reports")
    - If the chunk contains all query words joined by single spaces, add
      2 points per query word

    No normalization by chunk length, no stemming.

    Args:
        chunk_text: Chunk text (any case)
        query_words: Output of tokenize_query

    Returns:
        Non-negative score; 0 means no match
    """
    require_str(chunk_text, "chunk_text")
    if not isinstance(query_words, list):
        raise InvalidArgumentError(f"query_words must be list, got {type(query_words).__name__}")
    if not query_words:
        return 0

    text_lower = chunk_text.lower()
    score = 0

    for word in query_words:
        score += len(re.findall(re.escape(word), text_lower, flags=re.IGNORECASE))

    phrase = " ".join(query_words)
    if phrase in text_lower:
        score += len(query_words) * PHRASE_BONUS_PER_WORD

    return score
