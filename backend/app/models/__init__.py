"""Models package - re-exports for convenience."""

from backend.app.models.answer import Answer, AskRequest, AskResponse, RetrievalMode
from backend.app.models.docs import (
    AddDocumentResult,
    AssembledContext,
    Document,
    DocumentContent,
    SearchResult,
    UserId,
)

__all__ = [
    # Docs
    "UserId",
    "Document",
    "AddDocumentResult",
    "SearchResult",
    "DocumentContent",
    "AssembledContext",
    # Answer
    "Answer",
    "AskRequest",
    "AskResponse",
    "RetrievalMode",
]
