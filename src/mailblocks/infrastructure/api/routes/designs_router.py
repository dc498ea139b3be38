"""Saved design endpoints: publish, autosave, load and delete."""

import json
from typing import Any, List

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from mailblocks.core.logging import get_logger
from mailblocks.domain.services.editor_adapter import from_editor_data, to_editor_data
from mailblocks.domain.services.template_validator import validate_template
from mailblocks.infrastructure.api.dependencies import Publisher
from mailblocks.infrastructure.api.schemas import (
    DesignDraftRequest,
    DesignResponse,
    DesignSaveRequest,
    DesignSummaryResponse,
    DiagnosticResponse,
    DraftSavedResponse,
)
from mailblocks.infrastructure.persistence.database import get_db_session
from mailblocks.infrastructure.persistence.models.email_design import EmailDesignModel
from mailblocks.infrastructure.persistence.repositories.email_design_repository import (
    EmailDesignRepository,
)
from mailblocks.infrastructure.services.mjml.html_renderer import MjmlDiagnostic
from mailblocks.infrastructure.services.template_publisher import PublishedTemplate

router = APIRouter(tags=["designs"])
logger = get_logger(__name__)

DEFAULT_DESIGN_NAME = "Untitled design"


def _design_not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Design not found")


def _load_draft(design: EmailDesignModel) -> dict[str, Any] | None:
    # Drafts are stored unvalidated; anything but an object is not a loadable draft
    draft = json.loads(design.draft_json) if design.draft_json else None
    return draft if isinstance(draft, dict) else None


def _to_response(
    design: EmailDesignModel, diagnostics: list[MjmlDiagnostic] | None = None
) -> DesignResponse:
    return DesignResponse(
        id=design.id,
        name=design.name,
        template=json.loads(design.template_json),
        mjml=design.mjml,
        html=design.html,
        draft=_load_draft(design),
        draft_saved_at=design.draft_saved_at,
        created_at=design.created_at,
        updated_at=design.updated_at,
        errors=[DiagnosticResponse.model_validate(d.to_dict()) for d in diagnostics or []],
    )


async def _publish(request: DesignSaveRequest, publisher: Publisher) -> PublishedTemplate:
    candidate = from_editor_data(request.editor) if request.editor is not None else request.template
    return await publisher.publish(candidate)


@router.post("", response_model=DesignResponse, status_code=status.HTTP_201_CREATED)
async def create_design(
    request: DesignSaveRequest,
    publisher: Publisher,
    db: AsyncSession = Depends(get_db_session),
) -> DesignResponse:
    """Create a design from a valid template.

    The MJML is always compiled server-side and rendered to HTML.
    """
    published = await _publish(request, publisher)
    repository = EmailDesignRepository(db)
    design = await repository.create(
        name=request.name or published.template["metadata"]["subject"] or DEFAULT_DESIGN_NAME,
        template=published.template,
        mjml=published.mjml,
        html=published.html,
    )
    logger.info("Design created", design_id=design.id, html_length=len(design.html))
    return _to_response(design, published.diagnostics)


@router.get("", response_model=List[DesignSummaryResponse])
async def list_designs(
    skip: int = 0,
    limit: int = 100,
    db: AsyncSession = Depends(get_db_session),
) -> list[DesignSummaryResponse]:
    """List saved designs, most recently published first."""
    designs = await EmailDesignRepository(db).list_all(skip=skip, limit=limit)
    return [
        DesignSummaryResponse(
            id=design.id,
            name=design.name,
            has_draft=design.draft_json is not None,
            draft_saved_at=design.draft_saved_at,
            created_at=design.created_at,
            updated_at=design.updated_at,
        )
        for design in designs
    ]


@router.get("/{design_id}", response_model=DesignResponse)
async def get_design(design_id: str, db: AsyncSession = Depends(get_db_session)) -> DesignResponse:
    design = await EmailDesignRepository(db).get_by_id(design_id)
    if design is None:
        raise _design_not_found()
    return _to_response(design)


@router.get("/{design_id}/editor")
async def get_design_editor_data(
    design_id: str,
    draft: bool = False,
    db: AsyncSession = Depends(get_db_session),
) -> dict:
    """Load a design as editor data.

    With ``draft=true`` the autosaved draft is loaded when one exists.
    """
    design = await EmailDesignRepository(db).get_by_id(design_id)
    if design is None:
        raise _design_not_found()

    pending = _load_draft(design) if draft else None
    return to_editor_data(pending if pending is not None else json.loads(design.template_json))


@router.put("/{design_id}", response_model=DesignResponse)
async def publish_design(
    design_id: str,
    request: DesignSaveRequest,
    publisher: Publisher,
    db: AsyncSession = Depends(get_db_session),
) -> DesignResponse:
    """Publish a new version of a design. Clears any pending draft."""
    repository = EmailDesignRepository(db)
    if await repository.get_by_id(design_id) is None:
        raise _design_not_found()

    published = await _publish(request, publisher)
    design = await repository.update_published(
        design_id,
        template=published.template,
        mjml=published.mjml,
        html=published.html,
        name=request.name,
    )
    if design is None:
        raise _design_not_found()

    logger.info("Design published", design_id=design_id)
    return _to_response(design, published.diagnostics)


@router.put("/{design_id}/draft", response_model=DraftSavedResponse)
async def save_draft(
    design_id: str,
    request: DesignDraftRequest,
    db: AsyncSession = Depends(get_db_session),
) -> DraftSavedResponse:
    """Autosave a draft.

    Drafts are stored even when invalid so no edit is lost; the validation
    outcome is reported alongside.
    """
    result = validate_template(request.template)
    design = await EmailDesignRepository(db).save_draft(design_id, request.template)
    if design is None:
        raise _design_not_found()

    logger.debug("Draft saved", design_id=design_id, valid=result.valid)
    return DraftSavedResponse(
        id=design.id,
        draft_saved_at=design.draft_saved_at,
        valid=result.valid,
        errors=result.errors,
    )


@router.delete("/{design_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_design(design_id: str, db: AsyncSession = Depends(get_db_session)) -> Response:
    deleted = await EmailDesignRepository(db).delete(design_id)
    if not deleted:
        raise _design_not_found()

    logger.info("Design deleted", design_id=design_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
