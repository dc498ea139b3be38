"""Pydantic schemas for saved email designs."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from mailblocks.infrastructure.api.schemas.template_schemas import DiagnosticResponse


class DesignSaveRequest(BaseModel):
    """Request schema for creating or publishing a design.

    The template may be sent in its persisted shape (``json``) or as the
    editor's own data (``editor``). A client-compiled ``mjml`` is accepted
    for compatibility but the server always recompiles.
    """

    model_config = ConfigDict(populate_by_name=True)

    name: str | None = Field(None, min_length=1, max_length=255, description="Design name")
    template: Any = Field(None, alias="json", description="Template JSON")
    editor: dict[str, Any] | None = Field(None, description="Editor data")
    mjml: str | None = Field(None, description="Client-compiled MJML (ignored)")

    @model_validator(mode="after")
    def require_template(self) -> "DesignSaveRequest":
        if self.template is None and self.editor is None:
            raise ValueError("Either 'json' or 'editor' must be provided")
        if self.template is not None and self.editor is not None:
            raise ValueError("Provide only one of 'json' or 'editor'")
        return self


class DesignDraftRequest(BaseModel):
    """Request schema for autosaving a draft.

    The draft itself may be invalid, but it must be a JSON object.
    """

    model_config = ConfigDict(populate_by_name=True)

    template: dict[str, Any] = Field(..., alias="json", description="Template JSON")


class DesignResponse(BaseModel):
    """Response schema for a design."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    template: dict[str, Any] = Field(..., alias="json")
    mjml: str
    html: str
    draft: dict[str, Any] | None = None
    draft_saved_at: datetime | None = None
    created_at: datetime
    updated_at: datetime
    errors: list[DiagnosticResponse] = Field(
        default_factory=list, description="Rendering diagnostics from this save"
    )


class DesignSummaryResponse(BaseModel):
    """Response schema for design listings."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    has_draft: bool = False
    draft_saved_at: datetime | None = None
    created_at: datetime
    updated_at: datetime


class DraftSavedResponse(BaseModel):
    """Response schema for an autosaved draft."""

    id: str
    draft_saved_at: datetime | None
    valid: bool
    errors: list[str] = Field(default_factory=list)
