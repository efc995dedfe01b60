"""Document domain models."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class DocumentFormat(str, Enum):
    """Markup format of a document body."""

    html = "html"
    latex = "latex"
    rtf = "rtf"

    @property
    def extension(self) -> str:
        """File extension used on export."""
        return "tex" if self is DocumentFormat.latex else self.value

    @property
    def mime_type(self) -> str:
        """MIME type used on export."""
        return _MIME_TYPES[self]


_MIME_TYPES = {
    DocumentFormat.html: "text/html",
    DocumentFormat.latex: "application/x-latex",
    DocumentFormat.rtf: "application/rtf",
}


class Document(BaseModel):
    """Persisted document.

    A save always replaces whole fields; there are no partial writes of content.
    """

    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    content: str
    format: DocumentFormat
    created_at: datetime
    updated_at: datetime


class DocumentCreate(BaseModel):
    """Fields accepted when creating a document."""

    title: str = Field("Untitled Document", max_length=200)
    content: str = ""
    format: DocumentFormat = DocumentFormat.html


class DocumentUpdate(BaseModel):
    """Partial update - only fields that are set are written."""

    title: str | None = Field(None, max_length=200)
    content: str | None = None
    format: DocumentFormat | None = None
