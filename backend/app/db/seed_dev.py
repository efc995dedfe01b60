"""Dev seeding helper - a welcome document for empty databases."""

import asyncio
import logging

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from backend.app.db.engine import get_session_factory
from backend.app.db.sql_repositories import SqlDocumentStore
from backend.app.docs.templates import DEFAULT_HTML, WELCOME_TITLE
from backend.app.models.documents import DocumentFormat

logger = logging.getLogger(__name__)


async def seed_welcome_document(
    session_factory: async_sessionmaker[AsyncSession] | None = None,
) -> bool:
    """Seed the welcome document when no documents exist yet.

    This function is idempotent - safe to run multiple times.

    Returns:
        True if a document was created
    """
    factory = session_factory or get_session_factory()

    async with factory() as session:
        store = SqlDocumentStore(session)

        if await store.list_all():
            logger.info("Database already has documents, skipping seed")
            return False

        logger.info("Seeding database with sample document...")
        await store.create(WELCOME_TITLE, DEFAULT_HTML, DocumentFormat.html)
        return True


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    asyncio.run(seed_welcome_document())
