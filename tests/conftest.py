"""Shared pytest fixtures for all test suites."""

from collections.abc import Iterator

import pytest
from fastapi.testclient import TestClient

from backend.app.api.deps import get_document_store, get_llm, get_pdf_fallback
from backend.app.docs.store import DocumentStore
from backend.app.llm.client import DeterministicStubClient
from backend.app.main import app


@pytest.fixture
def store() -> DocumentStore:
    """Fresh, isolated document store."""
    return DocumentStore()


@pytest.fixture
def client(store: DocumentStore) -> Iterator[TestClient]:
    """Test client whose routes use the isolated store, the stub LLM and no PDF fallback.

    Usage:
        def test_something(client, store):
            client.post("/docs/text", json={...})
            assert store.get_document_count("anonymous") == 1
    """
    app.dependency_overrides[get_document_store] = lambda: store
    app.dependency_overrides[get_llm] = lambda: DeterministicStubClient()
    app.dependency_overrides[get_pdf_fallback] = lambda: None

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()
