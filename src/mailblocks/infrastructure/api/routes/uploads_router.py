"""Image upload endpoints for the editor's image fields."""

from fastapi import APIRouter, HTTPException, status
from fastapi.responses import FileResponse, JSONResponse, Response

from mailblocks.core.logging import get_logger
from mailblocks.infrastructure.api.dependencies import Storage, UploadService
from mailblocks.infrastructure.api.schemas import (
    ImageUploadErrorResponse,
    ImageUploadRequest,
    ImageUploadResponse,
)
from mailblocks.infrastructure.storage.image_upload_service import ImageUploadError

router = APIRouter(tags=["uploads"])
logger = get_logger(__name__)


@router.post(
    "/images",
    response_model=ImageUploadResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ImageUploadErrorResponse}},
)
async def upload_image(request: ImageUploadRequest, upload_service: UploadService):
    """Store an uploaded image and return the URL to use as its src.

    Rejected uploads answer 400 with ``{"error": "<message>"}``.
    """
    try:
        stored = await upload_service.upload(request.name, request.type, request.data)
    except ImageUploadError as e:
        logger.warning("Image upload rejected", filename=request.name, error=str(e))
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=ImageUploadErrorResponse(error=str(e)).model_dump(),
        )

    return ImageUploadResponse(
        url=stored.url,
        path=stored.path,
        size=stored.size,
        mime_type=stored.mime_type,
    )


@router.get("/files/{file_path:path}", response_model=None)
async def download_image(file_path: str, storage: Storage) -> FileResponse | Response:
    """Serve an uploaded image."""
    try:
        stored = await storage.get_file(file_path)
    except ValueError:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid file path")
    except FileNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="File not found")

    if stored.local_path is not None:
        return FileResponse(path=stored.local_path)
    return Response(
        content=stored.content or b"",
        media_type=stored.mime_type or "application/octet-stream",
    )
