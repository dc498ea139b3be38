"""MJML engine boundary."""

from mailblocks.infrastructure.services.mjml.html_renderer import (
    MjmlDiagnostic,
    MjmlRenderer,
    RenderResult,
    get_mjml_renderer,
)

__all__ = ["MjmlDiagnostic", "MjmlRenderer", "RenderResult", "get_mjml_renderer"]
