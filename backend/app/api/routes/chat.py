"""Chat endpoint - POST /api/documents/{id}/chat streams one turn as SSE."""

from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import StreamingResponse
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from backend.app.chat.gateway import ChatGateway
from backend.app.config import Settings, get_settings
from backend.app.db.engine import get_session_factory
from backend.app.db.sql_repositories import SqlChatHistoryStore, SqlDocumentStore
from backend.app.llm.client import CompletionClientFactory, get_completion_client_factory
from backend.app.models.chat import ChatTurnRequest
from backend.app.models.events import encode_sse_frame

router = APIRouter(prefix="/api/documents", tags=["chat"])


@router.post("/{document_id}/chat")
async def chat_turn(
    document_id: int,
    request: ChatTurnRequest,
    session_factory: Annotated[async_sessionmaker[AsyncSession], Depends(get_session_factory)],
    client_factory: Annotated[CompletionClientFactory, Depends(get_completion_client_factory)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> StreamingResponse:
    """Stream one chat turn.

    Args:
        document_id: Document the conversation belongs to
        request: User message, document snapshot, format and provider overrides
        session_factory: Session factory (the stream owns its own session)
        client_factory: Completion client factory
        settings: Application settings

    Returns:
        text/event-stream of content, documentUpdate, done and error frames

    Raises:
        HTTPException: 404 if the document does not exist
    """
    async with session_factory() as session:
        if await SqlDocumentStore(session).get(document_id) is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Document not found",
            )

    client = client_factory(request.provider, settings)

    async def event_generator() -> AsyncGenerator[str, None]:
        """Generate SSE events."""
        async with session_factory() as stream_session:
            gateway = ChatGateway(
                documents=SqlDocumentStore(stream_session),
                history=SqlChatHistoryStore(stream_session),
                client=client,
                history_limit=settings.chat_history_limit,
            )
            async for frame in gateway.stream_turn(document_id, request):
                yield encode_sse_frame(frame)

    return StreamingResponse(
        event_generator(),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
            "X-Accel-Buffering": "no",  # Disable nginx buffering
        },
    )
