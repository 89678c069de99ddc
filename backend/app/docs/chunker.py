"""Document chunker - sentence-packed chunks with word overlap."""

import re

from backend.app.docs.errors import require_str

# Break after ., ! or ? followed by whitespace; the punctuation stays with its sentence.
SENTENCE_BOUNDARY = re.compile(r"(?<=[.!?])\s+")

# Characters per word assumed when turning the overlap budget into a word count.
CHARS_PER_WORD = 10


def split_sentences(text: str) -> list[str]:
    """Split text into sentences on terminal punctuation followed by whitespace.

    Abbreviations ("Mr. Smith") are split like any other boundary; "3.14" is
    not, since no whitespace follows the dot.
    """
    return SENTENCE_BOUNDARY.split(require_str(text, "text"))


def overlap_word_count(overlap: int) -> int:
    """Number of trailing words carried into the next chunk."""
    return overlap // CHARS_PER_WORD


def chunk_text(text: str, max_size: int = 3000, overlap: int = 500) -> list[str]:
    """Chunk text into ordered, overlapping segments.

    Pure function with no I/O or randomness.

    Args:
        text: Raw extracted document text
        max_size: Target maximum characters per chunk
        overlap: Overlap budget in characters, carried as overlap // 10 words

    Returns:
        Ordered list of chunks. Never empty: input that produces no chunks
        (e.g. "") is returned as a single verbatim element.

    Strategy:
        1. Split into sentences
        2. Pack sentences greedily while the buffer stays within max_size
        3. On overflow, close the chunk and seed the next one with the
           closed chunk's trailing words
        4. A single sentence longer than max_size becomes its own chunk
    """
    sentences = split_sentences(text)
    carry = overlap_word_count(overlap)

    chunks: list[str] = []
    current = ""

    for sentence in sentences:
        if current and len(current) + len(sentence) > max_size:
            chunks.append(current.strip())
            tail = current.split(" ")[-carry:] if carry > 0 else []
            current = " ".join(tail) + " " + sentence
        else:
            current += (" " if current else "") + sentence

    if current.strip():
        chunks.append(current.strip())

    return chunks if chunks else [text]
