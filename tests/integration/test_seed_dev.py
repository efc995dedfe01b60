"""Integration tests for the dev seed helper."""

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from backend.app.db.seed_dev import seed_welcome_document
from backend.app.db.sql_repositories import SqlDocumentStore
from backend.app.docs.templates import DEFAULT_HTML, WELCOME_TITLE
from backend.app.models.documents import DocumentFormat


@pytest.mark.asyncio
async def test_seed_creates_welcome_document_once(
    session_factory: async_sessionmaker[AsyncSession],
) -> None:
    """Test that seeding is idempotent."""
    assert await seed_welcome_document(session_factory) is True
    assert await seed_welcome_document(session_factory) is False

    async with session_factory() as session:
        documents = await SqlDocumentStore(session).list_all()

    assert len(documents) == 1
    assert documents[0].title == WELCOME_TITLE
    assert documents[0].content == DEFAULT_HTML


@pytest.mark.asyncio
async def test_seed_skips_non_empty_database(
    session_factory: async_sessionmaker[AsyncSession],
) -> None:
    """Test that existing documents prevent seeding."""
    async with session_factory() as session:
        await SqlDocumentStore(session).create("Mine", "", DocumentFormat.html)

    assert await seed_welcome_document(session_factory) is False
