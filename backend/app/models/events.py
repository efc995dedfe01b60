"""Chat stream frames - what travels over the text/event-stream response.

Wire shapes (one JSON object per ``data:`` line):

- ``{"content": str}`` text delta
- ``{"documentUpdate": str}`` full document replacement (absolute final content)
- ``{"done": true}`` terminal
- ``{"error": str}`` error, also terminal for the client
"""

import json
from typing import Any, Literal

from pydantic import BaseModel

SSE_DATA_PREFIX = "data:"


class TextDelta(BaseModel):
    """Incremental assistant text."""

    kind: Literal["text_delta"] = "text_delta"
    content: str

    def to_payload(self) -> dict[str, Any]:
        return {"content": self.content}


class DocumentReplacement(BaseModel):
    """Replacement extracted from the finished response."""

    kind: Literal["document_replacement"] = "document_replacement"
    document_update: str

    def to_payload(self) -> dict[str, Any]:
        return {"documentUpdate": self.document_update}


class TurnDone(BaseModel):
    """Terminal frame; server-side state is consistent when this is sent."""

    kind: Literal["done"] = "done"

    def to_payload(self) -> dict[str, Any]:
        return {"done": True}


class TurnError(BaseModel):
    """Error frame."""

    kind: Literal["error"] = "error"
    error: str

    def to_payload(self) -> dict[str, Any]:
        return {"error": self.error}


StreamFrame = TextDelta | DocumentReplacement | TurnDone | TurnError


def encode_sse_frame(frame: StreamFrame) -> str:
    """Serialize a frame as one SSE event (data line + blank line)."""
    return f"{SSE_DATA_PREFIX} {json.dumps(frame.to_payload())}\n\n"


def frame_from_payload(data: Any) -> StreamFrame | None:
    """Build a frame from a decoded JSON payload.

    Returns None for objects that match no known shape (keep-alive noise,
    unknown extensions).
    """
    if not isinstance(data, dict):
        return None

    error = data.get("error")
    if error:
        return TurnError(error=str(error))

    document_update = data.get("documentUpdate")
    if isinstance(document_update, str):
        return DocumentReplacement(document_update=document_update)

    content = data.get("content")
    if isinstance(content, str) and content:
        return TextDelta(content=content)

    if data.get("done") is True:
        return TurnDone()

    return None
