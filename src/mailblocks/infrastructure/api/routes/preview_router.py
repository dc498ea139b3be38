"""Server-side preview rendering."""

from fastapi import APIRouter

from mailblocks.core.logging import get_logger
from mailblocks.infrastructure.api.dependencies import Renderer
from mailblocks.infrastructure.api.schemas import (
    DiagnosticResponse,
    PreviewRequest,
    PreviewResponse,
)

router = APIRouter(tags=["preview"])
logger = get_logger(__name__)


@router.post("", response_model=PreviewResponse)
async def render_preview(request: PreviewRequest, renderer: Renderer) -> PreviewResponse:
    """Render MJML to HTML for the editor's preview pane.

    Rendering problems are returned as diagnostics with a 200 status;
    the editor shows whatever HTML the engine managed to produce.
    """
    result = await renderer.render_async(request.mjml)
    logger.debug("Preview rendered", html_length=len(result.html), error_count=len(result.errors))
    return PreviewResponse(
        html=result.html,
        errors=[DiagnosticResponse.model_validate(e.to_dict()) for e in result.errors],
    )
