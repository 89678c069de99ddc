"""In-memory, per-user document store."""

import logging
import threading

from backend.app.docs.chunker import chunk_text
from backend.app.docs.errors import InvalidArgumentError, require_str
from backend.app.docs.scoring import score_chunk, tokenize_query
from backend.app.models.docs import (
    AddDocumentResult,
    Document,
    DocumentContent,
    SearchResult,
    UserId,
)

logger = logging.getLogger(__name__)


def _require_uid(uid: object) -> UserId:
    # bool is an int subclass but never a meaningful user id
    if isinstance(uid, bool) or not isinstance(uid, (str, int)):
        raise InvalidArgumentError(f"uid must be str or int, got {type(uid).__name__}")
    return uid


class DocumentStore:
    """Per-user ordered document collections held for the process lifetime.

    Collections are fully isolated per user id, created lazily on the first
    add and removed only by clear_documents. All operations hold a single
    lock, so the store is safe for threadpool or multi-threaded callers.
    Concurrent adds of the same file name are last-write-wins.
    """

    def __init__(
        self,
        *,
        chunk_size: int = 3000,
        chunk_overlap: int = 500,
        search_limit: int = 10,
    ) -> None:
        self._collections: dict[UserId, list[Document]] = {}
        self._lock = threading.RLock()
        self.chunk_size = chunk_size
        self.chunk_overlap = chunk_overlap
        self.search_limit = search_limit

    def add_document(self, uid: UserId, file_name: str, content: str) -> AddDocumentResult:
        """Chunk and store a document, replacing any document with the same name.

        A replaced document keeps its position in the collection; a new one
        is appended.
        """
        _require_uid(uid)
        require_str(file_name, "file_name")
        require_str(content, "content")

        doc = Document(
            file_name=file_name,
            content=content,
            chunks=chunk_text(content, self.chunk_size, self.chunk_overlap),
        )

        with self._lock:
            docs = self._collections.setdefault(uid, [])
            index = self._find(docs, file_name)
            if index is None:
                docs.append(doc)
            else:
                docs[index] = doc
            total = len(docs)

        logger.info(
            f"Stored document {file_name!r} ({len(doc.chunks)} chunks, "
            f"{'replaced' if index is not None else 'added'})",
            extra={"structured": {"uid": str(uid), "file_name": file_name, "total": total}},
        )

        return AddDocumentResult(
            file_name=file_name,
            chunks_count=len(doc.chunks),
            total_documents=total,
        )

    def get_documents(self, uid: UserId) -> list[Document]:
        """Get the user's documents in collection order (empty if unknown)."""
        _require_uid(uid)
        with self._lock:
            return list(self._collections.get(uid, []))

    def get_document_count(self, uid: UserId) -> int:
        _require_uid(uid)
        with self._lock:
            return len(self._collections.get(uid, []))

    def get_document_names(self, uid: UserId) -> list[str]:
        _require_uid(uid)
        with self._lock:
            return [doc.file_name for doc in self._collections.get(uid, [])]

    def delete_document(self, uid: UserId, file_name: str) -> bool:
        """Remove the first document named file_name.

        Returns:
            True if a document was removed, False otherwise (including unknown uid)
        """
        _require_uid(uid)
        require_str(file_name, "file_name")

        with self._lock:
            docs = self._collections.get(uid)
            if docs is None:
                return False
            index = self._find(docs, file_name)
            if index is None:
                return False
            del docs[index]

        logger.info(f"Deleted document {file_name!r}", extra={"structured": {"uid": str(uid)}})
        return True

    def clear_documents(self, uid: UserId) -> bool:
        """Drop the user's whole collection. Always returns True."""
        _require_uid(uid)
        with self._lock:
            removed = self._collections.pop(uid, None)

        if removed:
            logger.info(
                f"Cleared {len(removed)} document(s)", extra={"structured": {"uid": str(uid)}}
            )
        return True

    def search_documents(self, uid: UserId, query: str) -> list[SearchResult]:
        """Search the user's chunks by keyword relevance.

        Every chunk of every document is scored in collection order; chunks
        scoring 0 are dropped. Results are sorted by score descending with
        ties kept in encounter order, then cut to search_limit.

        Args:
            uid: User id
            query: Natural-language query

        Returns:
            Up to search_limit results, best first
        """
        _require_uid(uid)
        query_words = tokenize_query(query)

        with self._lock:
            docs = list(self._collections.get(uid, []))

        if not docs or not query_words:
            return []

        results: list[SearchResult] = []
        for doc in docs:
            for chunk in doc.chunks:
                score = score_chunk(chunk, query_words)
                if score > 0:
                    results.append(SearchResult(file_name=doc.file_name, chunk=chunk, score=score))

        # sorted() is stable, including with reverse=True
        results = sorted(results, key=lambda r: r.score, reverse=True)
        return results[: self.search_limit]

    def get_all_content(self, uid: UserId) -> list[DocumentContent]:
        """Full document bodies in collection order; chunks are not consulted."""
        _require_uid(uid)
        with self._lock:
            return [
                DocumentContent(file_name=doc.file_name, content=doc.content)
                for doc in self._collections.get(uid, [])
            ]

    def user_count(self) -> int:
        """Number of users with a live collection."""
        with self._lock:
            return len(self._collections)

    @staticmethod
    def _find(docs: list[Document], file_name: str) -> int | None:
        for index, doc in enumerate(docs):
            if doc.file_name == file_name:
                return index
        return None
