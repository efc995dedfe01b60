"""SQL implementations of repository interfaces."""

from datetime import datetime, timezone

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.db.models import ChatMessage as ChatMessageDB
from backend.app.db.models import Document as DocumentDB
from backend.app.models.chat import ChatMessage, ChatRole
from backend.app.models.documents import Document, DocumentFormat


class SqlDocumentStore:
    """SQL implementation of DocumentStore."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(self, title: str, content: str, format: DocumentFormat) -> Document:
        """Create a new document."""
        now = datetime.now(timezone.utc)
        row = DocumentDB(
            title=title,
            content=content,
            format=DocumentFormat(format).value,
            created_at=now,
            updated_at=now,
        )
        self._session.add(row)
        await self._session.commit()
        await self._session.refresh(row)

        return Document.model_validate(row)

    async def get(self, document_id: int) -> Document | None:
        """Get document by ID."""
        row = await self._session.get(DocumentDB, document_id)
        if row is None:
            return None
        return Document.model_validate(row)

    async def update(
        self,
        document_id: int,
        *,
        title: str | None = None,
        content: str | None = None,
        format: DocumentFormat | None = None,
    ) -> Document | None:
        """Replace the given fields and bump updated_at."""
        row = await self._session.get(DocumentDB, document_id)
        if row is None:
            return None

        if title is not None:
            row.title = title
        if content is not None:
            row.content = content
        if format is not None:
            row.format = DocumentFormat(format).value
        row.updated_at = datetime.now(timezone.utc)

        await self._session.commit()
        await self._session.refresh(row)
        return Document.model_validate(row)

    async def list_all(self) -> list[Document]:
        """List all documents, most recently updated first."""
        result = await self._session.execute(
            select(DocumentDB).order_by(DocumentDB.updated_at.desc(), DocumentDB.id.desc())
        )
        return [Document.model_validate(row) for row in result.scalars().all()]

    async def delete(self, document_id: int) -> None:
        """Delete a document together with its chat history."""
        await self._session.execute(
            delete(ChatMessageDB).where(ChatMessageDB.document_id == document_id)
        )
        await self._session.execute(delete(DocumentDB).where(DocumentDB.id == document_id))
        await self._session.commit()


class SqlChatHistoryStore:
    """SQL implementation of ChatHistoryStore."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def append(self, document_id: int, role: ChatRole, content: str) -> ChatMessage:
        """Append a message to a document's conversation."""
        row = ChatMessageDB(
            document_id=document_id,
            role=role,
            content=content,
            created_at=datetime.now(timezone.utc),
        )
        self._session.add(row)
        await self._session.commit()
        await self._session.refresh(row)

        return ChatMessage.model_validate(row)

    async def list(self, document_id: int, limit: int | None = None) -> list[ChatMessage]:
        """List messages ordered by creation time."""
        query = select(ChatMessageDB).where(ChatMessageDB.document_id == document_id)

        if limit is not None:
            # Most recent N, re-sorted oldest first below
            query = query.order_by(ChatMessageDB.created_at.desc(), ChatMessageDB.id.desc())
            query = query.limit(limit)
            result = await self._session.execute(query)
            rows = list(reversed(result.scalars().all()))
        else:
            query = query.order_by(ChatMessageDB.created_at, ChatMessageDB.id)
            result = await self._session.execute(query)
            rows = list(result.scalars().all())

        return [ChatMessage.model_validate(row) for row in rows]

    async def delete_for_document(self, document_id: int) -> None:
        """Delete every message of a document."""
        await self._session.execute(
            delete(ChatMessageDB).where(ChatMessageDB.document_id == document_id)
        )
        await self._session.commit()
