"""API Schemas for request/response validation."""

from mailblocks.infrastructure.api.schemas.design_schemas import (
    DesignDraftRequest,
    DesignResponse,
    DesignSaveRequest,
    DesignSummaryResponse,
    DraftSavedResponse,
)
from mailblocks.infrastructure.api.schemas.template_schemas import (
    CompileResponse,
    DiagnosticResponse,
    InvalidTemplateDetail,
    PreviewRequest,
    PreviewResponse,
    ValidationResponse,
)
from mailblocks.infrastructure.api.schemas.upload_schemas import (
    ImageUploadErrorResponse,
    ImageUploadRequest,
    ImageUploadResponse,
)

__all__ = [
    "CompileResponse",
    "DesignDraftRequest",
    "DesignResponse",
    "DesignSaveRequest",
    "DesignSummaryResponse",
    "DiagnosticResponse",
    "DraftSavedResponse",
    "ImageUploadErrorResponse",
    "ImageUploadRequest",
    "ImageUploadResponse",
    "InvalidTemplateDetail",
    "PreviewRequest",
    "PreviewResponse",
    "ValidationResponse",
]
