"""AI completion gateway - one chat turn as a stream of frames.

Ordering contract for a turn:

1. the user message is persisted before any upstream call
2. text deltas are forwarded as the model produces them
3. once the upstream stream is drained, a replacement block (if any) is
   written to the document store, then announced with a replacement frame
4. the raw assistant message is persisted
5. the terminal frame is sent last, so the client never finalizes state the
   server has not stored
"""

import logging
import time
from collections.abc import AsyncIterator

from backend.app.chat.markers import extract_document_update
from backend.app.chat.prompts import build_messages
from backend.app.db.repositories import ChatHistoryStore, DocumentStore
from backend.app.llm.client import CompletionClient
from backend.app.models.chat import ChatTurnRequest
from backend.app.models.events import (
    DocumentReplacement,
    StreamFrame,
    TextDelta,
    TurnDone,
    TurnError,
)
from backend.app.utils.logging import StructuredChatLogger
from backend.app.utils.metrics import PrometheusChatMetrics

logger = logging.getLogger(__name__)

TURN_FAILED_MESSAGE = "Failed to process message"


class ChatGateway:
    """Runs chat turns against a completion client and the stores."""

    def __init__(
        self,
        *,
        documents: DocumentStore,
        history: ChatHistoryStore,
        client: CompletionClient,
        history_limit: int = 10,
        metrics: PrometheusChatMetrics | None = None,
        turn_logger: StructuredChatLogger | None = None,
    ) -> None:
        self._documents = documents
        self._history = history
        self._client = client
        self._history_limit = history_limit
        self._metrics = metrics or PrometheusChatMetrics()
        self._turn_logger = turn_logger or StructuredChatLogger()

    async def stream_turn(
        self, document_id: int, request: ChatTurnRequest
    ) -> AsyncIterator[StreamFrame]:
        """Run one turn, yielding frames until a terminal or error frame.

        Never raises; failures become a single TurnError frame.

        Args:
            document_id: Document the conversation belongs to
            request: User message, document snapshot and provider overrides

        Yields:
            TextDelta frames, then optionally DocumentReplacement, then TurnDone
        """
        started = time.perf_counter()
        full_response = ""
        replaced = False

        try:
            await self._history.append(document_id, "user", request.content)
            history = await self._history.list(document_id, limit=self._history_limit)

            messages = build_messages(
                format=request.format,
                document_content=request.document_content,
                history=history,
            )

            async for text in self._client.stream_completion(messages=messages):
                if not text:
                    continue
                full_response += text
                yield TextDelta(content=text)

            updated_content = extract_document_update(full_response)
            if updated_content is not None:
                await self._documents.update(document_id, content=updated_content)
                replaced = True
                self._metrics.inc_replacement()
                yield DocumentReplacement(document_update=updated_content)

            await self._history.append(document_id, "assistant", full_response)

        except Exception as e:
            logger.exception(f"Chat turn failed for document {document_id}")
            latency_ms = (time.perf_counter() - started) * 1000
            self._metrics.record_turn("error", latency_ms)
            self._turn_logger.log_turn(
                document_id,
                "error",
                latency_ms,
                response_chars=len(full_response),
                replaced_document=replaced,
                error_reason=type(e).__name__,
            )
            yield TurnError(error=TURN_FAILED_MESSAGE)
            return

        latency_ms = (time.perf_counter() - started) * 1000
        self._metrics.record_turn("success", latency_ms)
        self._turn_logger.log_turn(
            document_id,
            "success",
            latency_ms,
            response_chars=len(full_response),
            replaced_document=replaced,
        )
        yield TurnDone()
