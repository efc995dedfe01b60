"""FastAPI application."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from backend.app.api.routes.chat import router as chat_router
from backend.app.api.routes.documents import router as documents_router
from backend.app.api.routes.files import router as files_router
from backend.app.api.routes.health import router as health_router
from backend.app.api.routes.metrics import router as metrics_router
from backend.app.config import get_settings
from backend.app.db.engine import get_async_engine
from backend.app.db.models import Base
from backend.app.db.seed_dev import seed_welcome_document

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Create the schema and seed the welcome document on startup."""
    settings = get_settings()

    if settings.auto_create_schema:
        async with get_async_engine().begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    if settings.seed_sample_document:
        try:
            await seed_welcome_document()
        except Exception:
            logger.exception("Error seeding database")

    yield


app = FastAPI(title="DocCraft API", version="0.1.0", lifespan=lifespan)

# Register routes
app.include_router(health_router, tags=["health"])
app.include_router(metrics_router, tags=["metrics"])
app.include_router(documents_router)
app.include_router(chat_router)
app.include_router(files_router)


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint."""
    return {"message": "DocCraft API", "version": "0.1.0"}
