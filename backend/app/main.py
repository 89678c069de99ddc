"""FastAPI application - document Q&A service."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from backend.app.api.routes.docs import router as docs_router
from backend.app.api.routes.health import router as health_router
from backend.app.api.routes.metrics import router as metrics_router
from backend.app.api.routes.qa import router as qa_router
from backend.app.config import get_settings
from backend.app.docs.extract import get_pdf_fallback
from backend.app.docs.store import DocumentStore
from backend.app.llm.client import get_llm_client

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Build the process-wide document store, LLM client and PDF fallback."""
    settings = get_settings()
    app.state.document_store = DocumentStore(
        chunk_size=settings.chunk_size,
        chunk_overlap=settings.chunk_overlap,
        search_limit=settings.search_limit,
    )
    app.state.llm_client = get_llm_client(settings)
    app.state.pdf_fallback = get_pdf_fallback(settings)
    logger.info("Document store ready")
    yield
    logger.info("Shutting down; in-memory documents are discarded")


app = FastAPI(title="DocQA Memory API", version="0.1.0", lifespan=lifespan)

# Register routes
app.include_router(health_router, tags=["health"])
app.include_router(metrics_router, tags=["metrics"])
app.include_router(docs_router, tags=["docs"])
app.include_router(qa_router, tags=["qa"])


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint."""
    return {"message": "DocQA Memory API", "version": "0.1.0"}
