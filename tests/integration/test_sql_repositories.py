"""Integration tests for the SQL document and chat history stores."""

import pytest
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

from backend.app.db.sql_repositories import SqlChatHistoryStore, SqlDocumentStore
from backend.app.models.documents import DocumentFormat


@pytest.mark.asyncio
async def test_create_and_get_document(db_session: AsyncSession) -> None:
    """Test that a created document is persisted with timestamps."""
    store = SqlDocumentStore(db_session)

    created = await store.create("Notes", "<p>a</p>", DocumentFormat.html)
    fetched = await store.get(created.id)

    assert fetched is not None
    assert fetched.title == "Notes"
    assert fetched.format == DocumentFormat.html
    assert fetched.created_at is not None
    assert fetched.updated_at is not None


@pytest.mark.asyncio
async def test_get_missing_document_returns_none(db_session: AsyncSession) -> None:
    """Test that an unknown id yields None."""
    assert await SqlDocumentStore(db_session).get(12345) is None


@pytest.mark.asyncio
async def test_update_replaces_only_given_fields(db_session: AsyncSession) -> None:
    """Test that omitted fields keep their values."""
    store = SqlDocumentStore(db_session)
    created = await store.create("Notes", "body", DocumentFormat.html)

    updated = await store.update(created.id, format=DocumentFormat.rtf)

    assert updated is not None
    assert updated.title == "Notes"
    assert updated.content == "body"
    assert updated.format == DocumentFormat.rtf
    assert updated.updated_at >= created.updated_at


@pytest.mark.asyncio
async def test_update_missing_document_returns_none(db_session: AsyncSession) -> None:
    """Test that updating an unknown id does nothing."""
    assert await SqlDocumentStore(db_session).update(999, title="x") is None


@pytest.mark.asyncio
async def test_history_limit_keeps_most_recent_in_order(db_session: AsyncSession) -> None:
    """Test that a limited listing returns the last N messages oldest first."""
    documents = SqlDocumentStore(db_session)
    history = SqlChatHistoryStore(db_session)
    document = await documents.create("Doc", "", DocumentFormat.html)
    for i in range(5):
        await history.append(document.id, "user", f"m{i}")

    limited = await history.list(document.id, limit=3)
    everything = await history.list(document.id)

    assert [m.content for m in limited] == ["m2", "m3", "m4"]
    assert [m.content for m in everything] == ["m0", "m1", "m2", "m3", "m4"]


@pytest.mark.asyncio
async def test_history_is_scoped_per_document(db_session: AsyncSession) -> None:
    """Test that conversations of different documents do not mix."""
    documents = SqlDocumentStore(db_session)
    history = SqlChatHistoryStore(db_session)
    a = await documents.create("A", "", DocumentFormat.html)
    b = await documents.create("B", "", DocumentFormat.html)

    await history.append(a.id, "user", "for a")
    await history.append(b.id, "user", "for b")

    assert [m.content for m in await history.list(a.id)] == ["for a"]
    await history.delete_for_document(a.id)
    assert await history.list(a.id) == []
    assert [m.content for m in await history.list(b.id)] == ["for b"]


@pytest.mark.asyncio
async def test_delete_document_removes_messages(db_session: AsyncSession) -> None:
    """Test that deleting a document deletes its conversation."""
    documents = SqlDocumentStore(db_session)
    history = SqlChatHistoryStore(db_session)
    document = await documents.create("A", "", DocumentFormat.html)
    await history.append(document.id, "user", "hi")

    await documents.delete(document.id)

    assert await documents.get(document.id) is None
    assert await history.list(document.id) == []


@pytest.mark.postgres
@pytest.mark.asyncio
async def test_postgres_round_trip(postgres_engine: AsyncEngine) -> None:
    """Test document and message storage on PostgreSQL."""
    async with AsyncSession(postgres_engine, expire_on_commit=False) as session:
        documents = SqlDocumentStore(session)
        history = SqlChatHistoryStore(session)
        document = await documents.create("PG", "\\section{x}", DocumentFormat.latex)
        await history.append(document.id, "assistant", "raw <<<DOCUMENT_UPDATE>>>")

        fetched = await documents.get(document.id)
        messages = await history.list(document.id)

    assert fetched is not None
    assert fetched.format == DocumentFormat.latex
    assert messages[0].content == "raw <<<DOCUMENT_UPDATE>>>"
