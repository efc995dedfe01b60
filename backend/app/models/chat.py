"""Chat message and chat turn models."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from backend.app.models.documents import DocumentFormat

ChatRole = Literal["user", "assistant"]


class ChatMessage(BaseModel):
    """One message in a document's conversation.

    Assistant content is the raw streamed text; it may still contain the
    replacement block markers. Display code cleans it, storage never does.
    Locally appended (optimistic) messages have no id until reloaded.
    """

    model_config = ConfigDict(from_attributes=True)

    id: int | None = None
    document_id: int
    role: ChatRole
    content: str
    created_at: datetime


class ProviderConfig(BaseModel):
    """Per-request upstream provider overrides.

    Empty values fall back to server settings.
    """

    api_key: str | None = None
    base_url: str | None = None
    model: str | None = None


class ChatTurnRequest(BaseModel):
    """Request body for POST /api/documents/{id}/chat."""

    content: str = Field(..., min_length=1, description="User message")
    document_content: str = Field("", description="Editor working copy at send time")
    format: DocumentFormat = DocumentFormat.html
    provider: ProviderConfig = Field(default_factory=ProviderConfig)
