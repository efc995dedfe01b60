"""Unit tests for upload text extraction."""

from unittest.mock import MagicMock, patch

import pytest

from backend.app.docs.ingest import DOCX_MIME, UnsupportedFileTypeError, extract_text


@pytest.mark.parametrize("filename", ["notes.txt", "page.html", "paper.tex", "letter.rtf"])
def test_text_formats_pass_through(filename: str) -> None:
    """Test that plain text formats are returned as decoded UTF-8."""
    assert extract_text("héllo\nworld".encode("utf-8"), filename) == "héllo\nworld"


def test_mime_type_is_enough_without_extension() -> None:
    """Test that a text MIME type is accepted for an extensionless file."""
    assert extract_text(b"plain", "upload", "text/plain; charset=utf-8") == "plain"


def test_legacy_doc_keeps_printable_text() -> None:
    """Test that binary noise in a .doc is replaced with spaces."""
    data = b"\xd0\xcf\x11\xe0Hello\x00World\n\tTab"

    text = extract_text(data, "old.doc")

    assert "Hello World\n\tTab" in text
    assert all(ch == " " or ch in "\n\r\t" or 0x20 <= ord(ch) <= 0x7E for ch in text)


@patch("backend.app.docs.ingest.mammoth")
def test_docx_is_converted_with_mammoth(mock_mammoth: MagicMock) -> None:
    """Test that .docx files go through raw text extraction."""
    mock_mammoth.extract_raw_text.return_value = MagicMock(value="Title\n\nBody", messages=[])

    text = extract_text(b"PK\x03\x04...", "report.docx")

    assert text == "Title\n\nBody"
    stream = mock_mammoth.extract_raw_text.call_args.args[0]
    assert stream.read() == b"PK\x03\x04..."


@patch("backend.app.docs.ingest.mammoth")
def test_docx_mime_type_wins_over_extension(mock_mammoth: MagicMock) -> None:
    """Test that a docx MIME type selects conversion regardless of the name."""
    mock_mammoth.extract_raw_text.return_value = MagicMock(value="x", messages=["note"])

    assert extract_text(b"PK", "download.bin", DOCX_MIME) == "x"


def test_unsupported_type_raises() -> None:
    """Test that unknown binary formats are rejected."""
    with pytest.raises(UnsupportedFileTypeError):
        extract_text(b"\x89PNG", "image.png", "image/png")
