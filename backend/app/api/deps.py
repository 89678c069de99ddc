"""Dependencies resolving process-wide collaborators from app state.

The store, LLM client and PDF fallback are built once in the application
lifespan; tests swap them with app.dependency_overrides.
"""

from fastapi import Request

from backend.app.config import Settings, get_settings
from backend.app.docs.extract import PdfTextFallback
from backend.app.docs.store import DocumentStore
from backend.app.llm.client import LLMClient


def get_document_store(request: Request) -> DocumentStore:
    return request.app.state.document_store


def get_llm(request: Request) -> LLMClient:
    return request.app.state.llm_client


def get_pdf_fallback(request: Request) -> PdfTextFallback | None:
    return request.app.state.pdf_fallback


def get_app_settings() -> Settings:
    return get_settings()
