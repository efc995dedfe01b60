"""Chat session controller - the per-document conversation state machine.

    idle -> awaiting_document (only when no document exists yet)
         -> sending -> streaming -> idle      (terminal frame)
                    \\-> error <-/             (transport failure or error frame)

The state itself is the one-turn-at-a-time guard: ``send_message`` refuses to
start while a turn is in flight, whatever surface triggered it. All frame
handling runs between two awaits of the stream reader, so frames of one turn
are never processed concurrently.
"""

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from backend.app.chat.markers import clean_streaming_content
from backend.app.docs.templates import DEFAULT_HTML
from backend.app.models.chat import ChatMessage, ChatTurnRequest
from backend.app.models.documents import DocumentFormat
from backend.app.models.events import DocumentReplacement, TextDelta, TurnDone, TurnError
from ui.api_client import DocCraftClient
from ui.persistence import DebouncedPersistenceBridge
from ui.settings_store import AISettings
from ui.stream_parser import StreamFrameParser

logger = logging.getLogger(__name__)


class TurnState(str, Enum):
    """Conversation state of a session."""

    idle = "idle"
    awaiting_document = "awaiting_document"
    sending = "sending"
    streaming = "streaming"
    error = "error"


class TurnInProgressError(RuntimeError):
    """Raised when a message is sent while another turn is still running."""


class ChatStreamError(Exception):
    """The stream reported an error or ended before its terminal frame."""


@dataclass
class WorkingCopy:
    """The editor's in-memory document, possibly ahead of storage."""

    document_id: int | None = None
    title: str = "Untitled Document"
    content: str = DEFAULT_HTML
    format: DocumentFormat = DocumentFormat.html


@dataclass(frozen=True)
class Notification:
    """A toast-style message for the user."""

    title: str
    description: str
    destructive: bool = False


@dataclass(frozen=True)
class Attachment:
    """A file attached to a chat message as extra context."""

    name: str
    content: str
    type: str = "text/plain"


def compose_message(text: str, attachments: list[Attachment] | None = None) -> str:
    """Append attached files to the user's text as labelled sections."""
    sections = [text] if text else []
    for attachment in attachments or []:
        sections.append(f"[Attached file: {attachment.name}]\n{attachment.content}")
    return "\n\n".join(sections)


@dataclass
class ChatSessionController:
    """Owns one editor session's conversation and mediates document updates.

    Attributes:
        api: Backend client
        working_copy: Shared editor document; the controller overwrites its
            content when the assistant sends a replacement
        settings: Provider settings threaded into every turn request
        bridge: Debounced persistence of manual edits; a replacement cancels
            its pending content save so the AI result is not overwritten
        listener: Called after every observable change (repaint hook)
    """

    api: DocCraftClient
    working_copy: WorkingCopy = field(default_factory=WorkingCopy)
    settings: AISettings = field(default_factory=AISettings)
    bridge: DebouncedPersistenceBridge | None = None
    listener: Callable[["ChatSessionController"], None] | None = None

    state: TurnState = TurnState.idle
    messages: list[ChatMessage] = field(default_factory=list)
    streaming_text: str = ""
    is_connected: bool = True
    notifications: list[Notification] = field(default_factory=list)
    last_replacement: str | None = None

    _closed: bool = field(default=False, init=False, repr=False)
    _turn_task: asyncio.Task | None = field(default=None, init=False, repr=False)

    @property
    def can_send(self) -> bool:
        """Whether a new turn may start."""
        return not self._closed and self.state in (TurnState.idle, TurnState.error)

    @property
    def turn_in_progress(self) -> bool:
        """Whether a turn is between its send and its terminal frame."""
        return self.state in (TurnState.awaiting_document, TurnState.sending, TurnState.streaming)

    @property
    def live_text(self) -> str:
        """The uncommitted assistant reply, cleaned for display."""
        return clean_streaming_content(self.streaming_text)

    def pop_notifications(self) -> list[Notification]:
        """Return and clear queued notifications."""
        queued, self.notifications = self.notifications, []
        return queued

    async def load_history(self) -> bool:
        """Replace local messages with the stored history of the working copy."""
        document_id = self.working_copy.document_id
        if document_id is None:
            self.messages = []
            self._publish_quietly()
            return True

        try:
            self.messages = await self.api.list_messages(document_id)
        except Exception as e:
            logger.warning(f"Failed to load chat history for document {document_id}: {e}")
            self.is_connected = False
            self._notify("Could not load chat", "Chat history is unavailable right now.", True)
            self._publish_quietly()
            return False

        self._publish_quietly()
        return True

    async def send_message(self, text: str, attachments: list[Attachment] | None = None) -> bool:
        """Run one turn.

        Errors never escape: they end in the error state with a notification.

        Args:
            text: User message
            attachments: Files to include as context

        Returns:
            True if the turn reached its terminal frame

        Raises:
            TurnInProgressError: If a turn is already running
        """
        if not self.can_send:
            raise TurnInProgressError(f"Cannot send while session is {self.state.value}")

        content = compose_message(text.strip(), attachments)
        if not content:
            return False

        self._turn_task = asyncio.current_task()
        try:
            return await self._run_turn(content)
        except asyncio.CancelledError:
            if not self._closed:
                raise
            self._abandon()
            return False
        finally:
            self._turn_task = None

    async def aclose(self) -> None:
        """Tear down the session. An in-flight reader is abandoned quietly."""
        self._closed = True

        task = self._turn_task
        if task is not None and task is not asyncio.current_task() and not task.done():
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass

        if self.bridge is not None:
            self.bridge.close()
        await self.api.aclose()

    async def _run_turn(self, content: str) -> bool:
        if self.working_copy.document_id is None:
            self.state = TurnState.awaiting_document
            self._publish_quietly()
            try:
                document = await self.api.create_document(
                    self.working_copy.title,
                    self.working_copy.content,
                    self.working_copy.format,
                )
            except Exception as e:
                logger.warning(f"Failed to create document before sending: {e}")
                self._notify(
                    "Could not create document",
                    "Your message was not sent. Please try again.",
                    True,
                )
                self.state = TurnState.error
                self._publish_quietly()
                return False
            self.working_copy.document_id = document.id

        document_id = self.working_copy.document_id

        self.state = TurnState.sending
        self.messages.append(
            ChatMessage(
                document_id=document_id,
                role="user",
                content=content,
                created_at=datetime.now(timezone.utc),
            )
        )
        self.streaming_text = ""
        self.is_connected = True

        try:
            self._publish()
            return await self._read_stream(document_id, content)
        except Exception as e:
            self._fail(e)
            return False

    async def _read_stream(self, document_id: int, content: str) -> bool:
        request = ChatTurnRequest(
            content=content,
            document_content=self.working_copy.content,
            format=self.working_copy.format,
            provider=self.settings.to_provider_config(),
        )
        parser = StreamFrameParser()
        response_text = ""

        async with self.api.stream_chat(document_id, request) as response:
            if response.is_error:
                await response.aread()
                response.raise_for_status()

            async for chunk in response.aiter_bytes():
                if self._closed:
                    self._abandon()
                    return False
                if self.state is TurnState.sending:
                    self._set_state(TurnState.streaming)

                for frame in parser.feed_frames(chunk):
                    if isinstance(frame, TextDelta):
                        response_text += frame.content
                        self.streaming_text = response_text
                        self._publish()
                    elif isinstance(frame, DocumentReplacement):
                        self._apply_replacement(frame.document_update)
                    elif isinstance(frame, TurnDone):
                        self._settle(document_id, response_text)
                        return True
                    elif isinstance(frame, TurnError):
                        raise ChatStreamError(frame.error)

        parser.close()
        raise ChatStreamError("Stream ended before the reply finished")

    def _apply_replacement(self, content: str) -> None:
        self.working_copy.content = content
        self.last_replacement = content
        if self.bridge is not None:
            self.bridge.cancel("content")
        self._notify("Document updated", "AI has applied changes to your document")
        self._publish()

    def _settle(self, document_id: int, response_text: str) -> None:
        # Raw text, markers included; display cleans it
        self.messages.append(
            ChatMessage(
                document_id=document_id,
                role="assistant",
                content=response_text,
                created_at=datetime.now(timezone.utc),
            )
        )
        self.streaming_text = ""
        self.state = TurnState.idle
        self._publish_quietly()

    def _fail(self, error: Exception) -> None:
        logger.warning(f"Chat turn failed: {type(error).__name__}: {error}")
        self._notify(
            "Message failed",
            "Could not send message to AI. Please check your settings.",
            True,
        )
        self.is_connected = False
        self.streaming_text = ""
        self.state = TurnState.error
        self._publish_quietly()

    def _abandon(self) -> None:
        logger.info("Chat session closed mid-turn, abandoning stream")
        self.streaming_text = ""
        self.state = TurnState.idle

    def _set_state(self, state: TurnState) -> None:
        self.state = state
        self._publish()

    def _notify(self, title: str, description: str, destructive: bool = False) -> None:
        self.notifications.append(Notification(title, description, destructive))

    def _publish(self) -> None:
        if self.listener is not None:
            self.listener(self)

    def _publish_quietly(self) -> None:
        try:
            self._publish()
        except Exception:
            logger.exception("Session listener failed")
