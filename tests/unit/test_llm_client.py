"""Tests for LLM client.

All tests are deterministic and do not make real network calls.
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from pydantic import SecretStr

from backend.app.config import Settings
from backend.app.docs.context import assemble_context
from backend.app.llm.client import DeterministicStubClient, OpenAIClient, get_llm_client
from backend.app.models.docs import AssembledContext, DocumentContent


@pytest.fixture
def sample_context() -> AssembledContext:
    """Create sample two-document context for testing."""
    return assemble_context(
        [
            DocumentContent(file_name="warranty.pdf", content="The warranty lasts two years."),
            DocumentContent(file_name="pricing.pdf", content="The basic plan costs $10."),
        ]
    )


def _mock_openai(content: str | None) -> AsyncMock:
    mock_response = MagicMock()
    mock_response.choices = [MagicMock()]
    mock_response.choices[0].message.content = content

    mock_openai_client = AsyncMock()
    mock_openai_client.chat.completions.create = AsyncMock(return_value=mock_response)
    return mock_openai_client


@pytest.mark.asyncio
async def test_deterministic_stub_client_generates_answer(sample_context: AssembledContext) -> None:
    """Test that DeterministicStubClient generates deterministic answer."""
    client = DeterministicStubClient()

    answer = await client.answer_question(
        question="How long is the warranty?",
        context=sample_context.context,
        sources=sample_context.sources,
    )

    assert "2 document(s)" in answer.answer
    assert "How long is the warranty?" in answer.answer
    assert answer.synthesis_source == "stub"


@pytest.mark.asyncio
async def test_deterministic_stub_client_is_deterministic(sample_context: AssembledContext) -> None:
    """Test that DeterministicStubClient produces same output every time."""
    client = DeterministicStubClient()
    kwargs = {
        "question": "What does it cost?",
        "context": sample_context.context,
        "sources": sample_context.sources,
    }

    answer1 = await client.answer_question(**kwargs)
    answer2 = await client.answer_question(**kwargs)

    assert answer1 == answer2


def test_openai_client_system_prompt_lists_documents(sample_context: AssembledContext) -> None:
    """Test that the system prompt enumerates sources and carries the context."""
    client = OpenAIClient(api_key="test_key")

    prompt = client._build_system_prompt(sample_context.sources, sample_context.context)

    assert "DOCUMENTS (2 total)" in prompt
    assert "1. warranty.pdf" in prompt
    assert "2. pricing.pdf" in prompt
    assert "The warranty lasts two years." in prompt
    assert "DOCUMENT: pricing.pdf" in prompt


@pytest.mark.asyncio
async def test_openai_client_calls_api_and_returns_answer(sample_context: AssembledContext) -> None:
    """Test that OpenAIClient calls API and returns answer (mocked)."""
    mock_openai_client = _mock_openai("The warranty lasts two years (warranty.pdf).")

    client = OpenAIClient(api_key="test_key", model="test-model")
    client.client = mock_openai_client

    answer = await client.answer_question(
        question="How long is the warranty?",
        context=sample_context.context,
        sources=sample_context.sources,
    )

    mock_openai_client.chat.completions.create.assert_called_once()
    call_kwargs = mock_openai_client.chat.completions.create.call_args.kwargs
    assert call_kwargs["model"] == "test-model"
    assert call_kwargs["messages"][1] == {"role": "user", "content": "How long is the warranty?"}

    assert answer.answer == "The warranty lasts two years (warranty.pdf)."
    assert answer.synthesis_source == "openai"


@pytest.mark.asyncio
async def test_openai_client_falls_back_to_stub_on_error(sample_context: AssembledContext) -> None:
    """Test that OpenAIClient falls back to stub when API call fails."""
    mock_openai_client = AsyncMock()
    mock_openai_client.chat.completions.create = AsyncMock(side_effect=Exception("API error"))

    client = OpenAIClient(api_key="test_key")
    client.client = mock_openai_client

    answer = await client.answer_question(
        question="Anything?",
        context=sample_context.context,
        sources=sample_context.sources,
    )

    assert "stub response" in answer.answer
    assert answer.synthesis_source == "stub"


@pytest.mark.asyncio
@pytest.mark.parametrize("content", ["", "   ", None])
async def test_openai_client_handles_empty_response(
    sample_context: AssembledContext, content: str | None
) -> None:
    """Test that OpenAIClient falls back to stub when API returns empty content."""
    client = OpenAIClient(api_key="test_key")
    client.client = _mock_openai(content)

    with patch("backend.app.llm.client.logger") as mock_logger:
        answer = await client.answer_question(
            question="Anything?",
            context=sample_context.context,
            sources=sample_context.sources,
        )

        mock_logger.warning.assert_called_with(
            "OpenAI returned empty response, using deterministic stub fallback"
        )

    assert answer.synthesis_source == "stub"


@pytest.mark.asyncio
async def test_openai_client_truncates_long_response(sample_context: AssembledContext) -> None:
    """Test that oversized answers are truncated with a marker."""
    client = OpenAIClient(api_key="test_key", max_answer_chars=100)
    client.client = _mock_openai("x" * 500)

    answer = await client.answer_question(
        question="Anything?",
        context=sample_context.context,
        sources=sample_context.sources,
    )

    assert answer.answer == "x" * 100 + "\n\n[Truncated]"
    assert answer.synthesis_source == "openai"


def test_get_llm_client_returns_stub_when_no_api_key() -> None:
    """Test that get_llm_client returns stub when no API key configured."""
    assert isinstance(get_llm_client(Settings(openai_api_key=None)), DeterministicStubClient)
    assert isinstance(get_llm_client(Settings(openai_api_key=SecretStr(""))), DeterministicStubClient)


def test_get_llm_client_returns_openai_when_api_key_present() -> None:
    """Test that get_llm_client returns OpenAI client configured from settings."""
    settings = Settings(openai_api_key=SecretStr("test_key"), openai_model="gpt-test", llm_max_tokens=50)

    client = get_llm_client(settings)

    assert isinstance(client, OpenAIClient)
    assert client.model == "gpt-test"
    assert client.max_tokens == 50
