"""File ingestion - extract editable text from uploaded files."""

import io
import logging
import re
from pathlib import PurePath

import mammoth

logger = logging.getLogger(__name__)

DOCX_MIME = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
DOC_MIME = "application/msword"

TEXT_MIME_TYPES = frozenset(
    {"text/plain", "text/html", "application/x-latex", "application/rtf", "text/rtf"}
)
TEXT_EXTENSIONS = frozenset({".txt", ".html", ".htm", ".tex", ".rtf"})

# Anything outside printable ASCII, newline, carriage return and tab
_NON_PRINTABLE_RE = re.compile(r"[^\x20-\x7E\n\r\t]")


class UnsupportedFileTypeError(ValueError):
    """Raised when an upload is neither a word-processor file nor plain text."""


def extract_text(data: bytes, filename: str, content_type: str | None = None) -> str:
    """Extract text content from an uploaded file.

    Binary word-processor formats are converted to plain text; plain text
    formats pass through unchanged.

    Args:
        data: Raw file bytes
        filename: Original file name (extension is used as a fallback type hint)
        content_type: Declared MIME type, if any

    Returns:
        Extracted text

    Raises:
        UnsupportedFileTypeError: If the type is not recognised
    """
    extension = PurePath(filename).suffix.lower()
    content_type = (content_type or "").split(";")[0].strip().lower()

    if content_type == DOCX_MIME or extension == ".docx":
        result = mammoth.extract_raw_text(io.BytesIO(data))
        for message in result.messages:
            logger.debug(f"docx conversion note for {filename}: {message}")
        return str(result.value)

    if content_type == DOC_MIME or extension == ".doc":
        # Legacy binary .doc: keep the readable runs only
        return _NON_PRINTABLE_RE.sub(" ", data.decode("utf-8", errors="replace"))

    if content_type in TEXT_MIME_TYPES or extension in TEXT_EXTENSIONS:
        return data.decode("utf-8", errors="replace")

    raise UnsupportedFileTypeError(f"Unsupported file format: {filename}")
