"""Unit tests for UI helper functions."""

from datetime import datetime, timezone

from backend.app.models.chat import ChatMessage
from backend.app.models.documents import DocumentFormat
from ui.helpers import (
    build_preview,
    build_status_view,
    build_transcript,
    format_size,
    rtf_to_plain_text,
)

NOW = datetime(2026, 1, 1, tzinfo=timezone.utc)


def test_format_size_units() -> None:
    """Test byte counts in B, KB and MB."""
    assert format_size(512) == "512 B"
    assert format_size(1536) == "1.5 KB"
    assert format_size(3 * 1024 * 1024) == "3.00 MB"


def test_build_status_view() -> None:
    """Test status bar values for a small document."""
    result = build_status_view("a\nbé", DocumentFormat.latex, is_connected=False)

    assert result == {
        "connection": "AI Disconnected",
        "format": "LATEX",
        "lines": 2,
        "characters": 4,
        "size": "5 B",
    }


def test_build_transcript_cleans_assistant_messages() -> None:
    """Test that replacement blocks are hidden but user text is untouched."""
    messages = [
        ChatMessage(document_id=1, role="user", content="<<<END_UPDATE>>> literal", created_at=NOW),
        ChatMessage(
            document_id=1,
            role="assistant",
            content="Sure!\n<<<DOCUMENT_UPDATE>>>\n<p>Hi</p>\n<<<END_UPDATE>>>\nDone.",
            created_at=NOW,
        ),
    ]

    result = build_transcript(messages, live_text="Thinking")

    assert result == [
        {"role": "user", "content": "<<<END_UPDATE>>> literal"},
        {"role": "assistant", "content": "Sure!\nDone."},
        {"role": "assistant", "content": "Thinking"},
    ]


def test_build_transcript_block_only_reply_gets_placeholder() -> None:
    """Test that a reply consisting only of a block is not shown empty."""
    messages = [
        ChatMessage(
            document_id=1,
            role="assistant",
            content="<<<DOCUMENT_UPDATE>>><p>x</p><<<END_UPDATE>>>",
            created_at=NOW,
        )
    ]

    assert build_transcript(messages) == [{"role": "assistant", "content": "_Document updated._"}]


def test_rtf_to_plain_text() -> None:
    """Test that paragraph and tab control words become whitespace."""
    assert rtf_to_plain_text("Hello\\par World\\tab!") == "Hello\n\n World    !"


def test_build_preview_kinds() -> None:
    """Test that each format gets its preview kind and RTF is escaped."""
    assert build_preview("<p>x</p>", DocumentFormat.html) == {"kind": "html", "body": "<p>x</p>"}
    assert build_preview("\\section{A}", DocumentFormat.latex)["kind"] == "latex"
    assert build_preview("a < b\\par", DocumentFormat.rtf) == {"kind": "text", "body": "a &lt; b"}
