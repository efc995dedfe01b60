"""In-memory implementations of repository interfaces."""

from datetime import datetime, timezone

from backend.app.models.chat import ChatMessage, ChatRole
from backend.app.models.documents import Document, DocumentFormat


class InMemoryDocumentStore:
    """In-memory implementation of DocumentStore."""

    def __init__(self) -> None:
        self._documents: dict[int, Document] = {}
        self._next_id = 1

    async def create(self, title: str, content: str, format: DocumentFormat) -> Document:
        """Create a new document."""
        now = datetime.now(timezone.utc)
        document = Document(
            id=self._next_id,
            title=title,
            content=content,
            format=format,
            created_at=now,
            updated_at=now,
        )
        self._documents[document.id] = document
        self._next_id += 1
        return document

    async def get(self, document_id: int) -> Document | None:
        """Get document by ID."""
        return self._documents.get(document_id)

    async def update(
        self,
        document_id: int,
        *,
        title: str | None = None,
        content: str | None = None,
        format: DocumentFormat | None = None,
    ) -> Document | None:
        """Replace the given fields and bump updated_at."""
        record = self._documents.get(document_id)
        if record is None:
            return None

        changes: dict[str, object] = {"updated_at": datetime.now(timezone.utc)}
        if title is not None:
            changes["title"] = title
        if content is not None:
            changes["content"] = content
        if format is not None:
            changes["format"] = DocumentFormat(format)

        updated = record.model_copy(update=changes)
        self._documents[document_id] = updated
        return updated

    async def list_all(self) -> list[Document]:
        """List all documents, most recently updated first."""
        return sorted(
            self._documents.values(),
            key=lambda d: (d.updated_at, d.id),
            reverse=True,
        )

    async def delete(self, document_id: int) -> None:
        """Delete a document.

        Chat history lives in a separate store; callers clear it themselves.
        """
        self._documents.pop(document_id, None)


class InMemoryChatHistoryStore:
    """In-memory implementation of ChatHistoryStore."""

    def __init__(self) -> None:
        self._messages: list[ChatMessage] = []

    async def append(self, document_id: int, role: ChatRole, content: str) -> ChatMessage:
        """Append a message to a document's conversation."""
        message = ChatMessage(
            id=len(self._messages) + 1,
            document_id=document_id,
            role=role,
            content=content,
            created_at=datetime.now(timezone.utc),
        )
        self._messages.append(message)
        return message

    async def list(self, document_id: int, limit: int | None = None) -> list[ChatMessage]:
        """List messages in insertion order."""
        messages = [m for m in self._messages if m.document_id == document_id]
        if limit is not None:
            messages = messages[-limit:] if limit > 0 else []
        return messages

    async def delete_for_document(self, document_id: int) -> None:
        """Delete every message of a document."""
        self._messages = [m for m in self._messages if m.document_id != document_id]
