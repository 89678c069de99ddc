"""Document domain models."""

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field

# Opaque per-user key (chat id, account id, ...)
UserId = str | int


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Document(BaseModel):
    """A user's uploaded document with its derived chunks.

    Chunks are derived from content when the document is added and are
    recomputed on every re-add; they are never edited in place.
    """

    model_config = ConfigDict(strict=True)

    file_name: str = Field(..., description="Unique key within one user's collection")
    content: str = Field(..., description="Full extracted text")
    chunks: list[str] = Field(default_factory=list)
    uploaded_at: datetime = Field(default_factory=_utcnow)


class AddDocumentResult(BaseModel):
    """Outcome of adding (or replacing) a document."""

    file_name: str
    chunks_count: int
    total_documents: int


class SearchResult(BaseModel):
    """Single chunk matched by a keyword search."""

    file_name: str
    chunk: str
    score: int = Field(..., gt=0)


class DocumentContent(BaseModel):
    """Full, untruncated document body."""

    file_name: str
    content: str


class AssembledContext(BaseModel):
    """Bounded multi-document context plus provenance."""

    context: str
    sources: list[str] = Field(default_factory=list)
