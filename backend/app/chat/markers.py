"""Document replacement block detection and display cleaning.

The assistant asks for a full-document overwrite by wrapping the new body in
a pair of literal markers. Extraction runs once on the complete response, so a
marker that is still being streamed can never trigger a false replacement.
"""

import re

DOCUMENT_UPDATE_START = "<<<DOCUMENT_UPDATE>>>"
DOCUMENT_UPDATE_END = "<<<END_UPDATE>>>"

_BLOCK_RE = re.compile(
    re.escape(DOCUMENT_UPDATE_START) + r"(.*?)" + re.escape(DOCUMENT_UPDATE_END),
    re.DOTALL,
)
# One newline in front of a block goes with it, so "a\n<block>\nb" cleans to "a\nb"
_BLOCK_WITH_LEAD_RE = re.compile(
    r"\n?" + re.escape(DOCUMENT_UPDATE_START) + r".*?" + re.escape(DOCUMENT_UPDATE_END),
    re.DOTALL,
)


def extract_document_update(text: str) -> str | None:
    """Return the trimmed body of the first complete replacement block.

    Args:
        text: Full assistant response

    Returns:
        Replacement document body, or None when no complete block is present
    """
    match = _BLOCK_RE.search(text)
    if match is None:
        return None
    return match.group(1).strip()


def clean_content(text: str) -> str:
    """Remove every complete replacement block, keeping the conversational text.

    Removal repeats until nothing matches, so the result is a fixed point and
    cleaning twice gives the same text as cleaning once.
    """
    cleaned = text
    while True:
        stripped = _BLOCK_WITH_LEAD_RE.sub("", cleaned)
        if stripped == cleaned:
            break
        cleaned = stripped
    return cleaned.strip()


def clean_streaming_content(text: str) -> str:
    """Clean text that may still be accumulating.

    Besides complete blocks, hides an open block whose end marker has not
    arrived yet and a trailing prefix of the start marker.
    """
    cleaned = clean_content(text)

    open_at = cleaned.find(DOCUMENT_UPDATE_START)
    if open_at != -1:
        cleaned = cleaned[:open_at]

    cleaned = cleaned.strip()
    while True:
        trimmed = _drop_partial_start_marker(cleaned).strip()
        if trimmed == cleaned:
            return cleaned
        cleaned = trimmed


def _drop_partial_start_marker(text: str) -> str:
    for size in range(len(DOCUMENT_UPDATE_START) - 1, 0, -1):
        if text.endswith(DOCUMENT_UPDATE_START[:size]):
            return text[:-size]
    return text
