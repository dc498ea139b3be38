"""Pydantic schemas for image uploads."""

from pydantic import BaseModel, Field


class ImageUploadRequest(BaseModel):
    """Upload payload sent by the editor's image fields."""

    name: str = Field(..., min_length=1, max_length=255, description="Original file name")
    type: str = Field(..., description="MIME type reported by the browser")
    data: str = Field(..., description="Base64 content or a data URL")


class ImageUploadResponse(BaseModel):
    """Response schema for a successful upload."""

    url: str = Field(..., description="Public URL to use as the image src")
    path: str = Field(..., description="Storage path of the image")
    size: int = Field(..., description="Size in bytes")
    mime_type: str


class ImageUploadErrorResponse(BaseModel):
    """Response schema for a rejected upload."""

    error: str
