"""File endpoints - POST /api/upload (text extraction) and POST /api/export."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, File, HTTPException, Response, UploadFile, status
from pydantic import BaseModel, Field

from backend.app.config import Settings, get_settings
from backend.app.docs.ingest import UnsupportedFileTypeError, extract_text
from backend.app.models.documents import DocumentFormat

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["files"])


class UploadResponse(BaseModel):
    """Response for POST /api/upload."""

    content: str
    filename: str


class ExportRequest(BaseModel):
    """Request body for POST /api/export."""

    content: str
    format: DocumentFormat = DocumentFormat.html
    filename: str = Field("document", max_length=200)


@router.post("/upload", response_model=UploadResponse)
async def upload_file(
    file: Annotated[UploadFile, File(description="File to extract text from")],
    settings: Annotated[Settings, Depends(get_settings)],
) -> UploadResponse:
    """Extract text from an uploaded document.

    Raises:
        HTTPException: 413 if the file is too large, 400 if the type is unsupported
    """
    data = await file.read(settings.upload_max_bytes + 1)
    if len(data) > settings.upload_max_bytes:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail="File too large",
        )

    filename = file.filename or "upload"
    try:
        content = extract_text(data, filename, file.content_type)
    except UnsupportedFileTypeError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Unsupported file format",
        ) from e
    except Exception as e:
        logger.exception(f"Error processing file {filename}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to process file",
        ) from e

    return UploadResponse(content=content, filename=filename)


@router.post("/export")
async def export_document(request: ExportRequest) -> Response:
    """Return the document body as a downloadable file."""
    filename = request.filename.strip() or "document"
    return Response(
        content=request.content,
        media_type=request.format.mime_type,
        headers={
            "Content-Disposition": (
                f'attachment; filename="{filename}.{request.format.extension}"'
            )
        },
    )
