"""Async HTTP client for the DocCraft backend."""

from contextlib import AbstractAsyncContextManager
from typing import Any

import httpx

from backend.app.models.chat import ChatMessage, ChatTurnRequest
from backend.app.models.documents import Document, DocumentFormat

DEFAULT_TIMEOUT = httpx.Timeout(30.0)
# A chat stream may sit idle while the model thinks; only connect is bounded
STREAM_TIMEOUT = httpx.Timeout(30.0, read=None)


class DocCraftClient:
    """Thin typed wrapper over the REST and streaming endpoints."""

    def __init__(
        self,
        base_url: str = "http://localhost:8000",
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            base_url: Backend base URL (e.g. http://localhost:8000)
            client: Pre-built httpx client (tests pass one with a mock transport)
        """
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(base_url=base_url, timeout=DEFAULT_TIMEOUT)

    async def list_documents(self) -> list[Document]:
        """Fetch all documents, most recently updated first."""
        response = await self._client.get("/api/documents")
        response.raise_for_status()
        return [Document.model_validate(item) for item in response.json()]

    async def get_document(self, document_id: int) -> Document:
        """Fetch one document.

        Raises:
            httpx.HTTPStatusError: If the document does not exist
        """
        response = await self._client.get(f"/api/documents/{document_id}")
        response.raise_for_status()
        return Document.model_validate(response.json())

    async def create_document(self, title: str, content: str, format: DocumentFormat) -> Document:
        """Create a document and return it with its id."""
        response = await self._client.post(
            "/api/documents",
            json={"title": title, "content": content, "format": DocumentFormat(format).value},
        )
        response.raise_for_status()
        return Document.model_validate(response.json())

    async def update_document(self, document_id: int, **fields: Any) -> Document:
        """Replace the given fields (title, content, format)."""
        payload = {
            key: value.value if isinstance(value, DocumentFormat) else value
            for key, value in fields.items()
        }
        response = await self._client.patch(f"/api/documents/{document_id}", json=payload)
        response.raise_for_status()
        return Document.model_validate(response.json())

    async def delete_document(self, document_id: int) -> None:
        """Delete a document and its chat history."""
        response = await self._client.delete(f"/api/documents/{document_id}")
        response.raise_for_status()

    async def list_messages(self, document_id: int) -> list[ChatMessage]:
        """Fetch a document's chat history, oldest first."""
        response = await self._client.get(f"/api/documents/{document_id}/messages")
        response.raise_for_status()
        return [ChatMessage.model_validate(item) for item in response.json()]

    def stream_chat(
        self, document_id: int, request: ChatTurnRequest
    ) -> AbstractAsyncContextManager[httpx.Response]:
        """Open the streaming chat request.

        Use as ``async with client.stream_chat(...) as response`` and read
        ``response.aiter_bytes()``.
        """
        return self._client.stream(
            "POST",
            f"/api/documents/{document_id}/chat",
            json=request.model_dump(mode="json"),
            headers={"Accept": "text/event-stream"},
            timeout=STREAM_TIMEOUT,
        )

    async def upload_file(
        self, filename: str, data: bytes, content_type: str | None = None
    ) -> str:
        """Send a file for text extraction and return the extracted text."""
        response = await self._client.post(
            "/api/upload",
            files={"file": (filename, data, content_type or "application/octet-stream")},
        )
        response.raise_for_status()
        return str(response.json()["content"])

    async def export_document(self, content: str, format: DocumentFormat, filename: str) -> bytes:
        """Render the export download body."""
        response = await self._client.post(
            "/api/export",
            json={"content": content, "format": DocumentFormat(format).value, "filename": filename},
        )
        response.raise_for_status()
        return response.content

    async def aclose(self) -> None:
        """Close the underlying HTTP client if this instance created it."""
        if self._owns_client:
            await self._client.aclose()
