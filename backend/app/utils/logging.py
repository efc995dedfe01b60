"""Structured logging for chat turns."""

import logging
from typing import Any

logger = logging.getLogger(__name__)


class StructuredChatLogger:
    """Structured logger for chat turn outcomes."""

    def log_turn(
        self,
        document_id: int,
        outcome: str,
        latency_ms: float,
        response_chars: int = 0,
        replaced_document: bool = False,
        error_reason: str | None = None,
    ) -> None:
        """Log a finished chat turn with structured data."""
        log_data: dict[str, Any] = {
            "document_id": document_id,
            "outcome": outcome,
            "latency_ms": round(latency_ms, 2),
            "response_chars": response_chars,
            "replaced_document": replaced_document,
        }

        if error_reason:
            log_data["error_reason"] = error_reason

        log_msg = f"Chat turn: document {document_id} - {outcome}"

        if outcome == "success":
            logger.info(log_msg, extra={"structured": log_data})
        else:
            logger.warning(log_msg, extra={"structured": log_data})
