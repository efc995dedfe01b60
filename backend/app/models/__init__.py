"""Models package - re-exports for convenience."""

from backend.app.models.chat import ChatMessage, ChatRole, ChatTurnRequest, ProviderConfig
from backend.app.models.documents import (
    Document,
    DocumentCreate,
    DocumentFormat,
    DocumentUpdate,
)
from backend.app.models.events import (
    DocumentReplacement,
    StreamFrame,
    TextDelta,
    TurnDone,
    TurnError,
    encode_sse_frame,
    frame_from_payload,
)

__all__ = [
    "ChatMessage",
    "ChatRole",
    "ChatTurnRequest",
    "Document",
    "DocumentCreate",
    "DocumentFormat",
    "DocumentReplacement",
    "DocumentUpdate",
    "ProviderConfig",
    "StreamFrame",
    "TextDelta",
    "TurnDone",
    "TurnError",
    "encode_sse_frame",
    "frame_from_payload",
]
