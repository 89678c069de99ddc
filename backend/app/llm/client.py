"""LLM client for document question answering with OpenAI integration.

Security: Reads API key from settings (environment) only, never hardcoded.
Provides deterministic fallback when no key present for testing.
"""

import logging
from typing import Protocol

from openai import AsyncOpenAI

from backend.app.config import Settings
from backend.app.models.answer import Answer

logger = logging.getLogger(__name__)


class LLMClient(Protocol):
    """Protocol for LLM client implementations."""

    async def answer_question(
        self,
        *,
        question: str,
        context: str,
        sources: list[str],
    ) -> Answer:
        """Answer a question grounded in document context.

        Args:
            question: User's natural-language question
            context: Assembled document context (headers + bodies)
            sources: File names the context was built from

        Returns:
            Answer with text and synthesis source
        """
        ...


class DeterministicStubClient:
    """Deterministic stub client for testing (no API key required)."""

    async def answer_question(
        self,
        *,
        question: str,
        context: str,
        sources: list[str],
    ) -> Answer:
        """Generate deterministic stub answer."""
        answer = (
            f"Searched {len(sources)} document(s) ({len(context)} characters of context) "
            f"for: {question}\n\n"
            "This is a stub response generated without LLM synthesis."
        )
        return Answer(answer=answer, synthesis_source="stub")


class OpenAIClient:
    """OpenAI-backed LLM client for real synthesis."""

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4o-mini",
        *,
        max_tokens: int = 2000,
        temperature: float = 0.3,
        max_answer_chars: int = 10_000,
    ):
        """Initialize OpenAI client.

        Args:
            api_key: OpenAI API key (read from environment)
            model: Model name to use
            max_tokens: Completion token cap
            temperature: Sampling temperature
            max_answer_chars: Longer answers are truncated
        """
        self.client = AsyncOpenAI(api_key=api_key)
        self.model = model
        self.max_tokens = max_tokens
        self.temperature = temperature
        self.max_answer_chars = max_answer_chars

    async def answer_question(
        self,
        *,
        question: str,
        context: str,
        sources: list[str],
    ) -> Answer:
        """Generate answer using OpenAI API, falling back to the stub on failure."""
        system_prompt = self._build_system_prompt(sources, context)

        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": question},
                ],
                temperature=self.temperature,
                max_tokens=self.max_tokens,
            )

            answer = response.choices[0].message.content or ""

            if not answer.strip():
                logger.warning("OpenAI returned empty response, using deterministic stub fallback")
                return await DeterministicStubClient().answer_question(
                    question=question, context=context, sources=sources
                )

            if len(answer) > self.max_answer_chars:
                logger.warning(
                    f"OpenAI response unexpectedly large ({len(answer)} chars), "
                    f"truncating to {self.max_answer_chars}"
                )
                answer = answer[: self.max_answer_chars] + "\n\n[Truncated]"

            return Answer(answer=answer, synthesis_source="openai")

        except Exception as e:
            logger.error(f"OpenAI API call failed: {e}")
            logger.warning("Falling back to deterministic stub client for synthesis")
            return await DeterministicStubClient().answer_question(
                question=question, context=context, sources=sources
            )

    def _build_system_prompt(self, sources: list[str], context: str) -> str:
        """Build system prompt listing the documents and carrying their contents."""
        listing = "\n".join(f"{i + 1}. {name}" for i, name in enumerate(sources))
        return f"""You are an assistant that answers questions using the user's uploaded documents.

INSTRUCTIONS:
- Look through ALL {len(sources)} documents below; the answer may be in any of them.
- When you find the answer, say which document it came from.
- If several documents are relevant, combine what they say.
- If none of the documents contain the answer, say "I couldn't find this information
  in any of the uploaded documents". Do not guess.
- Answer in the language the question is asked in.

DOCUMENTS ({len(sources)} total):
{listing}

DOCUMENT CONTENTS:
{context}"""


def get_llm_client(settings: Settings) -> LLMClient:
    """Factory function to get appropriate LLM client based on config.

    Returns:
        OpenAIClient if API key is configured, DeterministicStubClient otherwise
    """
    api_key = settings.openai_api_key

    if api_key and api_key.get_secret_value():
        logger.info("Using OpenAI client for synthesis")
        return OpenAIClient(
            api_key=api_key.get_secret_value(),
            model=settings.openai_model,
            max_tokens=settings.llm_max_tokens,
            temperature=settings.llm_temperature,
            max_answer_chars=settings.max_answer_chars,
        )
    else:
        logger.warning("No OpenAI API key configured, using deterministic stub client")
        return DeterministicStubClient()
