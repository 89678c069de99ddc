"""Health check endpoints.

- /health: liveness, always 200
- /healthz: component status (document store, LLM backend, PDF fallback)
"""

from typing import Annotated, Any

from fastapi import APIRouter, Depends

from backend.app.api.deps import get_document_store, get_llm, get_pdf_fallback
from backend.app.docs.extract import PdfTextFallback
from backend.app.docs.store import DocumentStore
from backend.app.llm.client import LLMClient, OpenAIClient

router = APIRouter()


def describe_store(store: DocumentStore) -> str:
    return f"ok ({store.user_count()} users)"


def describe_llm(llm: LLMClient) -> str:
    """Report which LLM backend answers questions.

    The stub is a valid (degraded-quality) backend, so there is no failing state.
    """
    if isinstance(llm, OpenAIClient):
        return "openai"
    return "stub"


def describe_pdf_fallback(fallback: PdfTextFallback | None) -> str:
    return "disabled" if fallback is None else "openai"


@router.get("/health")
async def health() -> dict[str, str]:
    """Simple health check for Docker/k8s.

    Returns:
        200 OK always (application is running)
    """
    return {"status": "ok"}


@router.get("/healthz")
async def healthz(
    store: Annotated[DocumentStore, Depends(get_document_store)],
    llm: Annotated[LLMClient, Depends(get_llm)],
    fallback: Annotated[PdfTextFallback | None, Depends(get_pdf_fallback)],
) -> dict[str, Any]:
    """Component status.

    Every component lives in process, so the service is ok whenever it can
    answer; the body says which backends are configured.
    """
    return {
        "status": "ok",
        "components": {
            "store": describe_store(store),
            "llm": describe_llm(llm),
            "pdf_fallback": describe_pdf_fallback(fallback),
        },
    }
