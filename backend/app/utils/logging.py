"""Structured logging for question answering."""

import logging
from typing import Any

logger = logging.getLogger(__name__)


class StructuredQueryLogger:
    """Structured logger for answered questions."""

    def log_answer(
        self,
        user_id: str,
        mode: str,
        outcome: str,
        latency_ms: float,
        sources: list[str],
        synthesis_source: str,
        context_chars: int = 0,
    ) -> None:
        """Log a question/answer round with structured data."""
        log_data: dict[str, Any] = {
            "user_id": user_id,
            "mode": mode,
            "outcome": outcome,
            "latency_ms": round(latency_ms, 2),
            "sources": sources,
            "synthesis_source": synthesis_source,
            "context_chars": context_chars,
        }

        log_msg = f"Question answered: mode={mode} - {outcome}"

        if outcome == "answered" and synthesis_source != "stub":
            logger.info(log_msg, extra={"structured": log_data})
        else:
            logger.warning(log_msg, extra={"structured": log_data})
