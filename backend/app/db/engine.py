"""Async engine and session plumbing for the document and chat stores."""

from collections.abc import AsyncGenerator

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from backend.app.config import Settings, get_settings

# Synchronous URL schemes mapped to the async driver used at runtime
_ASYNC_DRIVERS = {
    "postgresql://": "postgresql+asyncpg://",
    "sqlite://": "sqlite+aiosqlite://",
}

_async_engine: AsyncEngine | None = None
_session_factory: async_sessionmaker[AsyncSession] | None = None


def to_async_url(database_url: str) -> str:
    """Rewrite a plain postgres or sqlite URL to its async driver form."""
    for prefix, async_prefix in _ASYNC_DRIVERS.items():
        if database_url.startswith(prefix):
            return async_prefix + database_url[len(prefix) :]
    return database_url


def create_async_engine_from_settings(settings: Settings) -> AsyncEngine:
    """Build the engine for ``settings.database_url``.

    Raises:
        ValueError: If the database URL is empty.
    """
    if not settings.database_url:
        raise ValueError("DATABASE_URL is empty; point it at sqlite or postgres.")
    return create_async_engine(to_async_url(settings.database_url), pool_pre_ping=True)


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    # Rows are read after commit by the streaming chat handler
    return async_sessionmaker(bind=engine, expire_on_commit=False)


def get_async_engine() -> AsyncEngine:
    """Process-wide engine, created on first use."""
    global _async_engine
    if _async_engine is None:
        _async_engine = create_async_engine_from_settings(get_settings())
    return _async_engine


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """FastAPI dependency returning the shared session factory.

    The chat stream opens its own sessions from it since it outlives the
    request handler.
    """
    global _session_factory
    if _session_factory is None:
        _session_factory = create_session_factory(get_async_engine())
    return _session_factory


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency yielding one session per request."""
    async with get_session_factory()() as session:
        yield session
