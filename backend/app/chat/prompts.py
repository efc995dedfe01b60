"""Prompt construction for chat turns."""

from backend.app.chat.markers import DOCUMENT_UPDATE_END, DOCUMENT_UPDATE_START
from backend.app.models.chat import ChatMessage
from backend.app.models.documents import DocumentFormat

_FORMAT_GUIDANCE = {
    DocumentFormat.html: "For HTML, use proper semantic tags",
    DocumentFormat.latex: (
        "For LaTeX, use proper LaTeX syntax with commands like \\section{}, \\textbf{}, etc."
    ),
    DocumentFormat.rtf: "For RTF, use RTF control words like \\b for bold, \\i for italic",
}


def build_system_prompt(format: DocumentFormat, document_content: str) -> str:
    """Build the system prompt carrying the document snapshot.

    Args:
        format: Current document format
        document_content: Editor working copy at send time

    Returns:
        System prompt text
    """
    format = DocumentFormat(format)
    return f"""You are DocCraft AI, an intelligent document creation assistant. \
You help users write, edit, and improve their documents.

Current document format: {format.value.upper()}
Current document content:
---
{document_content}
---

IMPORTANT INSTRUCTION FOR DOCUMENT EDITS:
When the user asks you to edit, modify, add content, or make changes to the document, you MUST:
1. Generate the complete updated document
2. Return it in your response using this EXACT format:

{DOCUMENT_UPDATE_START}
[complete updated document here]
{DOCUMENT_UPDATE_END}

After the document update block, you can add a brief explanation of what you changed.

Guidelines:
- When editing, ALWAYS include the {DOCUMENT_UPDATE_START} block with the full updated content
- {_FORMAT_GUIDANCE[format]}
- Keep explanations brief and helpful"""


def build_messages(
    *,
    format: DocumentFormat,
    document_content: str,
    history: list[ChatMessage],
) -> list[dict[str, str]]:
    """Build the chat completion message list.

    History is replayed raw, replacement blocks included, so the model sees
    exactly what it produced before.
    """
    messages = [{"role": "system", "content": build_system_prompt(format, document_content)}]
    messages.extend({"role": m.role, "content": m.content} for m in history)
    return messages
