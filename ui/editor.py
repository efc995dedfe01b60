"""Editor session - working copy, debounced saves and chat wired together.

Manual edits go through the debounced bridge; format changes and document
switches are written immediately. The chat controller shares the working copy
and cancels a pending content save when the assistant replaces the document.
"""

import logging

from backend.app.docs.templates import DEFAULT_HTML, content_for_format_switch
from backend.app.models.documents import Document, DocumentFormat
from ui.api_client import DocCraftClient
from ui.persistence import DebouncedPersistenceBridge
from ui.session import (
    Attachment,
    ChatSessionController,
    Notification,
    TurnInProgressError,
    WorkingCopy,
)
from ui.settings_store import AISettings

logger = logging.getLogger(__name__)


class EditorSession:
    """One open editor: the current document and its chat."""

    def __init__(
        self,
        api: DocCraftClient,
        settings: AISettings | None = None,
        windows: dict[str, float] | None = None,
    ) -> None:
        """Initialize the session.

        Args:
            api: Backend client, closed with the session
            settings: Provider settings for chat turns
            windows: Debounce windows per field, seconds (title, content)
        """
        self.api = api
        self.working_copy = WorkingCopy()
        self.bridge = DebouncedPersistenceBridge(
            self._persist_field, windows=windows, on_error=self._on_persist_error
        )
        self.chat = ChatSessionController(
            api=api,
            working_copy=self.working_copy,
            settings=settings or AISettings(),
            bridge=self.bridge,
        )

    @property
    def notifications(self) -> list[Notification]:
        return self.chat.notifications

    def update_settings(self, settings: AISettings) -> None:
        """Use new provider settings from the next turn on."""
        self.chat.settings = settings

    def on_content_change(self, content: str) -> None:
        """Manual edit of the body; saved after the content window."""
        self.working_copy.content = content
        self.bridge.on_change("content", content)

    def on_title_change(self, title: str) -> None:
        """Manual edit of the title; saved after the title window."""
        self.working_copy.title = title
        self.bridge.on_change("title", title)

    async def change_format(self, format: DocumentFormat) -> None:
        """Switch format, swapping in a starter template if the body does not fit."""
        format = DocumentFormat(format)
        content = content_for_format_switch(self.working_copy.content, format)

        self.bridge.cancel("content")
        self.working_copy.format = format
        self.working_copy.content = content

        if self.working_copy.document_id is not None:
            await self.api.update_document(
                self.working_copy.document_id, format=format, content=content
            )

    async def open_document(self, document: Document) -> None:
        """Make ``document`` the working copy and load its chat.

        Pending edits of the previous document are saved first.

        Raises:
            TurnInProgressError: If a chat turn is still running
        """
        self._ensure_no_turn()
        await self.bridge.flush()

        self.working_copy.document_id = document.id
        self.working_copy.title = document.title
        self.working_copy.content = document.content
        self.working_copy.format = document.format
        self.chat.streaming_text = ""
        await self.chat.load_history()

    async def new_document(self) -> Document:
        """Create a blank HTML document and open it."""
        self._ensure_no_turn()
        await self.bridge.flush()
        document = await self.api.create_document("Untitled Document", DEFAULT_HTML, DocumentFormat.html)
        await self.open_document(document)
        return document

    async def list_documents(self) -> list[Document]:
        return await self.api.list_documents()

    async def delete_document(self, document_id: int) -> None:
        """Delete a document. Deleting the open one resets to an unsaved blank copy."""
        if document_id == self.working_copy.document_id:
            self._ensure_no_turn()
            self.bridge.close()
        await self.api.delete_document(document_id)

        if document_id == self.working_copy.document_id:
            self.working_copy.document_id = None
            self.working_copy.title = "Untitled Document"
            self.working_copy.content = DEFAULT_HTML
            self.working_copy.format = DocumentFormat.html
            self.chat.messages = []

    async def import_file(self, filename: str, data: bytes, content_type: str | None = None) -> str:
        """Replace the document body with the text extracted from a file."""
        content = await self.api.upload_file(filename, data, content_type)
        self.on_content_change(content)
        return content

    async def attach_file(
        self, filename: str, data: bytes, content_type: str | None = None
    ) -> Attachment:
        """Extract a file's text for use as chat context."""
        content = await self.api.upload_file(filename, data, content_type)
        return Attachment(name=filename, content=content, type=content_type or "text/plain")

    async def export(self) -> tuple[str, bytes]:
        """Download body for the working copy.

        Returns:
            (file name, file bytes)
        """
        name = self.working_copy.title.strip() or "document"
        body = await self.api.export_document(
            self.working_copy.content, self.working_copy.format, name
        )
        return f"{name}.{self.working_copy.format.extension}", body

    async def send_message(self, text: str, attachments: list[Attachment] | None = None) -> bool:
        return await self.chat.send_message(text, attachments)

    async def aclose(self) -> None:
        """Close the chat (and its client). Pending edits are dropped."""
        await self.chat.aclose()

    async def _persist_field(self, field: str, value: str) -> None:
        document_id = self.working_copy.document_id
        if document_id is None:
            return
        await self.api.update_document(document_id, **{field: value})

    def _on_persist_error(self, field: str, error: Exception) -> None:
        self.chat.notifications.append(
            Notification("Save failed", f"Could not save the document {field}.", True)
        )

    def _ensure_no_turn(self) -> None:
        # A running turn writes its replacement into the working copy
        if self.chat.turn_in_progress:
            raise TurnInProgressError("Cannot switch documents while the assistant is replying")
