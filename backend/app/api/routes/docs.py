"""Document endpoints - upload, list, delete, clear and search."""

import logging
from datetime import datetime
from typing import Annotated

from fastapi import APIRouter, Depends, File, HTTPException, Query, Response, UploadFile, status
from pydantic import BaseModel, Field

from backend.app.api.auth import RequestContext, get_current_context
from backend.app.api.deps import get_app_settings, get_document_store, get_pdf_fallback
from backend.app.config import Settings
from backend.app.docs.errors import ExtractionError
from backend.app.docs.extract import (
    SUPPORTED_EXTENSIONS,
    PdfTextFallback,
    extract_text,
    is_supported,
)
from backend.app.docs.store import DocumentStore
from backend.app.models.docs import SearchResult
from backend.app.utils.metrics import PrometheusDocMetrics

router = APIRouter(prefix="/docs", tags=["docs"])
logger = logging.getLogger(__name__)
metrics = PrometheusDocMetrics()


class AddTextRequest(BaseModel):
    """Request body for POST /docs/text (already-extracted text)."""

    file_name: str = Field(..., min_length=1, max_length=255, description="Document file name")
    text: str = Field(..., description="Extracted document text")


class UploadDocResponse(BaseModel):
    """Response for POST /docs and POST /docs/text."""

    file_name: str
    method: str
    pages: int | None = None
    chunks_count: int
    total_documents: int


class DocSummary(BaseModel):
    """Listing entry for one stored document."""

    file_name: str
    chars: int
    chunks_count: int
    uploaded_at: datetime


class DocListResponse(BaseModel):
    """Response for GET /docs."""

    docs: list[DocSummary]
    count: int


class ClearDocsResponse(BaseModel):
    """Response for DELETE /docs."""

    deleted: int


class DocSearchResponse(BaseModel):
    """Response for GET /docs/search."""

    matches: list[SearchResult]
    query: str


@router.post("", response_model=UploadDocResponse, status_code=status.HTTP_201_CREATED)
async def upload_doc(
    file: Annotated[UploadFile, File(description="PDF or plain-text file")],
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    store: Annotated[DocumentStore, Depends(get_document_store)],
    settings: Annotated[Settings, Depends(get_app_settings)],
    fallback: Annotated[PdfTextFallback | None, Depends(get_pdf_fallback)],
) -> UploadDocResponse:
    """Upload a file, extract its text and add it to the user's collection.

    A file with the same name replaces the stored one in place.

    Args:
        file: Uploaded file (.pdf, .txt, .md)
        ctx: Request context (user_id)
        store: Document store
        settings: Upload limits
        fallback: Remote extractor for scanned PDFs (None if unconfigured)

    Returns:
        Stored document summary

    Raises:
        HTTPException: 415 for unsupported types, 413 for oversized files,
            422 if no text could be extracted
    """
    file_name = file.filename or ""

    if not is_supported(file_name):
        metrics.record_ingest("rejected_type")
        raise HTTPException(
            status_code=status.HTTP_415_UNSUPPORTED_MEDIA_TYPE,
            detail=f"Unsupported file type; expected one of {', '.join(SUPPORTED_EXTENSIONS)}",
        )

    data = await file.read()

    max_bytes = settings.max_upload_size_mb * 1024 * 1024
    if len(data) > max_bytes:
        metrics.record_ingest("rejected_size")
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=(
                f"File too large ({len(data) / (1024 * 1024):.1f}MB). "
                f"Max is {settings.max_upload_size_mb}MB."
            ),
        )

    try:
        extracted = await extract_text(
            data, file_name, min_chars=settings.min_extracted_chars, fallback=fallback
        )
    except ExtractionError as e:
        logger.warning(f"Failed to process {file_name}: {e}")
        metrics.record_ingest("extraction_failed")
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e)) from e

    result = store.add_document(ctx.user_id, file_name, extracted.text)
    metrics.record_ingest("stored", chunks=result.chunks_count)

    return UploadDocResponse(
        file_name=result.file_name,
        method=extracted.method,
        pages=extracted.pages,
        chunks_count=result.chunks_count,
        total_documents=result.total_documents,
    )


@router.post("/text", response_model=UploadDocResponse, status_code=status.HTTP_201_CREATED)
async def add_doc_text(
    request: AddTextRequest,
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    store: Annotated[DocumentStore, Depends(get_document_store)],
) -> UploadDocResponse:
    """Add already-extracted text as a document."""
    result = store.add_document(ctx.user_id, request.file_name, request.text)
    metrics.record_ingest("stored", chunks=result.chunks_count)

    return UploadDocResponse(
        file_name=result.file_name,
        method="text",
        chunks_count=result.chunks_count,
        total_documents=result.total_documents,
    )


@router.get("", response_model=DocListResponse)
async def list_docs(
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    store: Annotated[DocumentStore, Depends(get_document_store)],
) -> DocListResponse:
    """List the user's documents in upload order."""
    docs = [
        DocSummary(
            file_name=doc.file_name,
            chars=len(doc.content),
            chunks_count=len(doc.chunks),
            uploaded_at=doc.uploaded_at,
        )
        for doc in store.get_documents(ctx.user_id)
    ]
    return DocListResponse(docs=docs, count=len(docs))


@router.delete("", response_model=ClearDocsResponse)
async def clear_docs(
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    store: Annotated[DocumentStore, Depends(get_document_store)],
) -> ClearDocsResponse:
    """Delete all of the user's documents."""
    count = store.get_document_count(ctx.user_id)
    store.clear_documents(ctx.user_id)
    return ClearDocsResponse(deleted=count)


@router.get("/search", response_model=DocSearchResponse)
async def search_docs_endpoint(
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    store: Annotated[DocumentStore, Depends(get_document_store)],
    query: Annotated[str, Query(min_length=1, max_length=500)],
) -> DocSearchResponse:
    """Search the user's document chunks by keyword relevance.

    Returns:
        Up to 10 matching chunks, best first
    """
    matches = store.search_documents(ctx.user_id, query)
    metrics.record_search(len(matches))
    return DocSearchResponse(matches=matches, query=query)


@router.delete("/{file_name:path}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_doc(
    file_name: str,
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    store: Annotated[DocumentStore, Depends(get_document_store)],
) -> Response:
    """Delete one document by file name.

    Raises:
        HTTPException: 404 if the user has no document with that name
    """
    if not store.delete_document(ctx.user_id, file_name):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"No document named {file_name!r}",
        )
    return Response(status_code=status.HTTP_204_NO_CONTENT)
