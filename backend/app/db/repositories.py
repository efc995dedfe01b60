"""Repository protocol interfaces for data access."""

from typing import Protocol

from backend.app.models.chat import ChatMessage, ChatRole
from backend.app.models.documents import Document, DocumentFormat


class DocumentStore(Protocol):
    """Repository for document operations."""

    async def create(self, title: str, content: str, format: DocumentFormat) -> Document:
        """Create a new document.

        Args:
            title: Document title
            content: Initial body in the given format
            format: Markup format

        Returns:
            The persisted document
        """
        ...

    async def get(self, document_id: int) -> Document | None:
        """Get document by ID, or None if not found."""
        ...

    async def update(
        self,
        document_id: int,
        *,
        title: str | None = None,
        content: str | None = None,
        format: DocumentFormat | None = None,
    ) -> Document | None:
        """Replace the given fields and bump updated_at.

        Args:
            document_id: Document ID
            title: New title, if changing
            content: New full content, if changing
            format: New format, if changing

        Returns:
            Updated document or None if not found
        """
        ...

    async def list_all(self) -> list[Document]:
        """List all documents, most recently updated first."""
        ...

    async def delete(self, document_id: int) -> None:
        """Delete a document together with its chat history."""
        ...


class ChatHistoryStore(Protocol):
    """Repository for chat message operations."""

    async def append(self, document_id: int, role: ChatRole, content: str) -> ChatMessage:
        """Append a message to a document's conversation.

        Args:
            document_id: Owning document
            role: user or assistant
            content: Raw message text

        Returns:
            The persisted message
        """
        ...

    async def list(self, document_id: int, limit: int | None = None) -> list[ChatMessage]:
        """List messages ordered by creation time.

        Args:
            document_id: Owning document
            limit: Keep only the most recent N messages (still oldest first)

        Returns:
            Messages, oldest first
        """
        ...

    async def delete_for_document(self, document_id: int) -> None:
        """Delete every message of a document."""
        ...
