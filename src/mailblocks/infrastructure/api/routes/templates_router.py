"""Template validation and compilation endpoints.

Invalid templates on ``/compile`` surface as ``TemplateValidationError`` and
are turned into a 422 by the application's exception handler.
"""

from typing import Any

from fastapi import APIRouter, Body

from mailblocks.core.logging import get_logger
from mailblocks.domain.constraints import EMAIL_CONSTRAINTS
from mailblocks.domain.services.template_validator import validate_template
from mailblocks.infrastructure.api.dependencies import Publisher
from mailblocks.infrastructure.api.schemas import CompileResponse, ValidationResponse

router = APIRouter(tags=["templates"])
logger = get_logger(__name__)


@router.get("/constraints")
async def get_constraints() -> dict[str, Any]:
    """Constraint catalog for the editor's pickers."""
    return EMAIL_CONSTRAINTS.to_dict()


@router.post("/validate", response_model=ValidationResponse)
async def validate(candidate: Any = Body(...)) -> ValidationResponse:
    """Validate a template against the email-safe constraints.

    Always answers 200; invalid templates come back with ``valid: false``.
    """
    result = validate_template(candidate)
    if not result.valid:
        logger.info("Template failed validation", error_count=len(result.errors))
    return ValidationResponse(valid=result.valid, errors=result.errors)


@router.post("/compile", response_model=CompileResponse)
async def compile_mjml(publisher: Publisher, candidate: Any = Body(...)) -> CompileResponse:
    """Compile a valid template to MJML."""
    _, mjml = publisher.compile(candidate)
    return CompileResponse(mjml=mjml)
