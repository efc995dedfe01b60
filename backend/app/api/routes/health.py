"""Health check endpoints.

/health is a liveness probe. /healthz also probes the database the document
and chat stores depend on, and reports degraded with 503 when it is down.
"""

from typing import Any

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse
from sqlalchemy import text

from backend.app.db.engine import get_async_engine

router = APIRouter()


async def check_db() -> tuple[bool, str]:
    """Run ``SELECT 1`` against the configured database.

    Returns:
        (is_ok, status_message)
    """
    try:
        async with get_async_engine().connect() as conn:
            await conn.execute(text("SELECT 1"))
    except Exception as e:
        return (False, f"error: {type(e).__name__}")
    return (True, "ok")


@router.get("/health")
async def health() -> dict[str, str]:
    """Liveness probe; 200 whenever the process serves requests."""
    return {"status": "ok"}


@router.get("/healthz", response_model=None)
async def healthz() -> dict[str, Any] | JSONResponse:
    """Readiness probe.

    Returns:
        200 with component status if the database is reachable
        503 with the same body otherwise
    """
    db_ok, db_status = await check_db()
    body = {
        "status": "ok" if db_ok else "degraded",
        "components": {"db": db_status},
    }

    if not db_ok:
        return JSONResponse(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, content=body)
    return body
