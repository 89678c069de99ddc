"""Answer models for the /qa endpoints."""

from typing import Literal

from pydantic import BaseModel, Field

RetrievalMode = Literal["full", "search"]


class Answer(BaseModel):
    """Text answer produced by an LLM client."""

    answer: str = Field(..., description="Answer text relayed to the user")
    synthesis_source: Literal["openai", "stub"] = Field(
        ..., description="Source of synthesis: 'openai' for real LLM, 'stub' for fallback"
    )


class AskRequest(BaseModel):
    """Request body for POST /qa/ask."""

    question: str = Field(..., min_length=1, max_length=4000)
    mode: RetrievalMode = Field(
        "full",
        description="'full' sends all documents (truncated to budget); 'search' sends top chunks",
    )


class AskResponse(BaseModel):
    """Response for POST /qa/ask."""

    answer: str
    sources: list[str] = Field(default_factory=list)
    mode: RetrievalMode
    synthesis_source: Literal["openai", "stub", "none"] = Field(
        ..., description="'none' when no model call was made (no documents / no matches)"
    )
