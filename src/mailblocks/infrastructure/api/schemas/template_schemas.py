"""Pydantic schemas for template validation, compilation and preview."""

from pydantic import BaseModel, ConfigDict, Field


class ValidationResponse(BaseModel):
    """Response schema for template validation."""

    valid: bool = Field(..., description="Whether the template passed validation")
    errors: list[str] = Field(default_factory=list, description="Validation error messages")


class CompileResponse(BaseModel):
    """Response schema for template compilation."""

    mjml: str = Field(..., description="Compiled MJML markup")


class DiagnosticResponse(BaseModel):
    """A problem reported by the MJML engine."""

    model_config = ConfigDict(populate_by_name=True)

    line: int
    message: str
    tag_name: str = Field(..., alias="tagName")
    formatted_message: str = Field(..., alias="formattedMessage")


class PreviewRequest(BaseModel):
    """Request schema for rendering a preview."""

    mjml: str = Field(..., min_length=1, description="MJML markup to render")


class PreviewResponse(BaseModel):
    """Response schema for a rendered preview."""

    html: str = Field(..., description="Rendered HTML, empty when rendering failed")
    errors: list[DiagnosticResponse] = Field(default_factory=list)


class InvalidTemplateDetail(BaseModel):
    """Body of the 422 response returned for invalid templates."""

    message: str = "Template is invalid"
    errors: list[str]
