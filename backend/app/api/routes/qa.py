"""QA endpoint - POST /qa/ask answers a question from the user's documents."""

import logging
import time
from typing import Annotated

from fastapi import APIRouter, Depends, status

from backend.app.api.auth import RequestContext, get_current_context
from backend.app.api.deps import get_app_settings, get_document_store, get_llm
from backend.app.config import Settings
from backend.app.docs.context import assemble_search_context, assemble_user_context
from backend.app.docs.store import DocumentStore
from backend.app.llm.client import LLMClient
from backend.app.models.answer import AskRequest, AskResponse
from backend.app.models.docs import AssembledContext
from backend.app.utils.logging import StructuredQueryLogger
from backend.app.utils.metrics import PrometheusDocMetrics

router = APIRouter(prefix="/qa", tags=["qa"])
logger = logging.getLogger(__name__)
query_logger = StructuredQueryLogger()
metrics = PrometheusDocMetrics()

NO_DOCUMENTS_ANSWER = "No documents uploaded yet. Please upload files first."
NO_MATCHES_ANSWER = "I couldn't find anything relevant to your question in the uploaded documents."


@router.post("/ask", response_model=AskResponse, status_code=status.HTTP_200_OK)
async def ask(
    request: AskRequest,
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    store: Annotated[DocumentStore, Depends(get_document_store)],
    llm: Annotated[LLMClient, Depends(get_llm)],
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> AskResponse:
    """Answer a question grounded in the user's uploaded documents.

    Modes:
    - full: every document body, each cut to an equal share of the context
      budget, goes to the model
    - search: only the top-scoring chunks go to the model

    Args:
        request: Question and retrieval mode
        ctx: Request context (user_id)
        store: Document store
        llm: LLM client
        settings: Context budget

    Returns:
        AskResponse with answer text and source file names
    """
    started = time.perf_counter()

    if store.get_document_count(ctx.user_id) == 0:
        return AskResponse(
            answer=NO_DOCUMENTS_ANSWER, sources=[], mode=request.mode, synthesis_source="none"
        )

    assembled: AssembledContext
    if request.mode == "search":
        results = store.search_documents(ctx.user_id, request.question)
        metrics.record_search(len(results))
        if not results:
            query_logger.log_answer(
                user_id=ctx.user_id,
                mode=request.mode,
                outcome="no_matches",
                latency_ms=(time.perf_counter() - started) * 1000,
                sources=[],
                synthesis_source="none",
            )
            return AskResponse(
                answer=NO_MATCHES_ANSWER, sources=[], mode=request.mode, synthesis_source="none"
            )
        assembled = assemble_search_context(results)
    else:
        assembled = assemble_user_context(
            store, ctx.user_id, max_total_context=settings.max_total_context
        )

    logger.info(f"Answering across {len(assembled.sources)} document(s) in {request.mode} mode")

    answer = await llm.answer_question(
        question=request.question,
        context=assembled.context,
        sources=assembled.sources,
    )

    latency_ms = (time.perf_counter() - started) * 1000
    metrics.record_answer(request.mode, answer.synthesis_source, latency_ms)
    query_logger.log_answer(
        user_id=ctx.user_id,
        mode=request.mode,
        outcome="answered",
        latency_ms=latency_ms,
        sources=assembled.sources,
        synthesis_source=answer.synthesis_source,
        context_chars=len(assembled.context),
    )

    return AskResponse(
        answer=answer.answer,
        sources=assembled.sources,
        mode=request.mode,
        synthesis_source=answer.synthesis_source,
    )
