"""Document endpoints - CRUD on /api/documents and message history listing."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.db.engine import get_session
from backend.app.db.sql_repositories import SqlChatHistoryStore, SqlDocumentStore
from backend.app.models.chat import ChatMessage
from backend.app.models.documents import Document, DocumentCreate, DocumentUpdate

router = APIRouter(prefix="/api/documents", tags=["documents"])


def _not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Document not found")


@router.get("", response_model=list[Document])
async def list_documents(
    session: Annotated[AsyncSession, Depends(get_session)],
) -> list[Document]:
    """List all documents, most recently updated first."""
    return await SqlDocumentStore(session).list_all()


@router.get("/{document_id}", response_model=Document)
async def get_document(
    document_id: int,
    session: Annotated[AsyncSession, Depends(get_session)],
) -> Document:
    """Get a single document.

    Raises:
        HTTPException: 404 if the document does not exist
    """
    document = await SqlDocumentStore(session).get(document_id)
    if document is None:
        raise _not_found()
    return document


@router.post("", response_model=Document, status_code=status.HTTP_201_CREATED)
async def create_document(
    request: DocumentCreate,
    session: Annotated[AsyncSession, Depends(get_session)],
) -> Document:
    """Create a new document."""
    return await SqlDocumentStore(session).create(
        title=request.title,
        content=request.content,
        format=request.format,
    )


@router.patch("/{document_id}", response_model=Document)
async def update_document(
    document_id: int,
    request: DocumentUpdate,
    session: Annotated[AsyncSession, Depends(get_session)],
) -> Document:
    """Replace the fields present in the request body.

    Raises:
        HTTPException: 404 if the document does not exist
    """
    document = await SqlDocumentStore(session).update(
        document_id,
        title=request.title,
        content=request.content,
        format=request.format,
    )
    if document is None:
        raise _not_found()
    return document


@router.delete("/{document_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_document(
    document_id: int,
    session: Annotated[AsyncSession, Depends(get_session)],
) -> Response:
    """Delete a document and its chat history."""
    await SqlDocumentStore(session).delete(document_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{document_id}/messages", response_model=list[ChatMessage])
async def list_messages(
    document_id: int,
    session: Annotated[AsyncSession, Depends(get_session)],
) -> list[ChatMessage]:
    """List a document's chat messages, oldest first."""
    return await SqlChatHistoryStore(session).list(document_id)
