"""Context assembly - bounded multi-document context for answer generation."""

from backend.app.docs.errors import InvalidArgumentError
from backend.app.docs.store import DocumentStore
from backend.app.models.docs import AssembledContext, DocumentContent, SearchResult, UserId

MAX_TOTAL_CONTEXT = 100_000

TRUNCATION_MARKER = "\n\n[... document truncated for length ...]"

_RULE = "=" * 60


def document_header(file_name: str) -> str:
    """Delimited header block preceding each document body."""
    return f"\n\n{_RULE}\nDOCUMENT: {file_name}\n{_RULE}\n"


def assemble_context(
    documents: list[DocumentContent],
    *,
    max_total_context: int = MAX_TOTAL_CONTEXT,
) -> AssembledContext:
    """Concatenate full document bodies under a hard total-size budget.

    Each document gets max_total_context // len(documents) characters; longer
    bodies are cut and followed by TRUNCATION_MARKER. Every file name is
    listed in sources, truncated or not.

    Args:
        documents: Full bodies in collection order (at least one)
        max_total_context: Total character budget for document bodies

    Returns:
        AssembledContext with context text and ordered sources

    Raises:
        InvalidArgumentError: If documents is empty
    """
    if not documents:
        raise InvalidArgumentError("assemble_context requires at least one document")

    max_per_doc = max_total_context // len(documents)

    parts: list[str] = []
    sources: list[str] = []

    for doc in documents:
        body = doc.content
        if len(body) > max_per_doc:
            body = body[:max_per_doc] + TRUNCATION_MARKER

        parts.append(document_header(doc.file_name) + body)
        sources.append(doc.file_name)

    return AssembledContext(context="".join(parts), sources=sources)


def assemble_user_context(
    store: DocumentStore,
    uid: UserId,
    *,
    max_total_context: int = MAX_TOTAL_CONTEXT,
) -> AssembledContext:
    """Assemble context from all of a user's documents.

    Callers must check the user has documents first.
    """
    return assemble_context(store.get_all_content(uid), max_total_context=max_total_context)


def assemble_search_context(results: list[SearchResult]) -> AssembledContext:
    """Build context from search results, one block per matched chunk.

    Sources are the distinct file names in first-seen (i.e. best-score) order.
    """
    parts: list[str] = []
    sources: list[str] = []

    for result in results:
        parts.append(f"{document_header(result.file_name)}[relevance: {result.score}]\n{result.chunk}")
        if result.file_name not in sources:
            sources.append(result.file_name)

    return AssembledContext(context="".join(parts), sources=sources)
