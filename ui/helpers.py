"""Helper functions for the editor UI - status bar, transcript and preview views."""

import html
import re
from typing import Any

from backend.app.chat.markers import clean_content
from backend.app.models.chat import ChatMessage
from backend.app.models.documents import DocumentFormat

# Ordered control-word rewrites for the plain-text RTF preview
_RTF_REPLACEMENTS = [
    (re.compile(r"\\par\b"), "\n\n"),
    (re.compile(r"\\tab\b"), "    "),
    (re.compile(r"\\(?:b|i)0?\b"), ""),
    (re.compile(r"\{[^}]*\}"), ""),
    (re.compile(r"\\[a-z]+\d*\s?", re.IGNORECASE), ""),
]


def format_size(num_bytes: int) -> str:
    """Human-readable byte count (B, KB with one decimal, MB with two)."""
    if num_bytes < 1024:
        return f"{num_bytes} B"
    if num_bytes < 1024 * 1024:
        return f"{num_bytes / 1024:.1f} KB"
    return f"{num_bytes / (1024 * 1024):.2f} MB"


def build_status_view(content: str, format: DocumentFormat, is_connected: bool) -> dict[str, Any]:
    """Build status bar view for the working copy.

    Args:
        content: Document body
        format: Document format
        is_connected: Whether the last chat turn reached the AI

    Returns:
        Dict with connection, format, lines, characters and size
    """
    return {
        "connection": "AI Connected" if is_connected else "AI Disconnected",
        "format": DocumentFormat(format).value.upper(),
        "lines": len(content.split("\n")),
        "characters": len(content),
        "size": format_size(len(content.encode("utf-8"))),
    }


def build_transcript(messages: list[ChatMessage], live_text: str = "") -> list[dict[str, str]]:
    """Build chat transcript entries for display.

    Assistant messages are stored raw; replacement blocks are hidden here.
    An assistant message that was only a replacement block shows a short
    placeholder instead of an empty bubble.

    Args:
        messages: Committed messages, oldest first
        live_text: Cleaned, still-streaming assistant text

    Returns:
        List of {"role", "content"} dicts, the live reply last
    """
    entries = []
    for message in messages:
        content = message.content
        if message.role == "assistant":
            content = clean_content(content) or "_Document updated._"
        entries.append({"role": message.role, "content": content})

    if live_text:
        entries.append({"role": "assistant", "content": live_text})
    return entries


def rtf_to_plain_text(content: str) -> str:
    """Rough RTF to text conversion, good enough for a preview."""
    for pattern, replacement in _RTF_REPLACEMENTS:
        content = pattern.sub(replacement, content)
    return content.strip()


def build_preview(content: str, format: DocumentFormat) -> dict[str, str]:
    """Build the preview pane for a document.

    Returns:
        Dict with ``kind`` ("html", "latex" or "text") and ``body``
    """
    format = DocumentFormat(format)
    if format is DocumentFormat.html:
        return {"kind": "html", "body": content}
    if format is DocumentFormat.latex:
        return {"kind": "latex", "body": content}
    return {"kind": "text", "body": html.escape(rtf_to_plain_text(content))}
