"""Validate, compile and render a template in one step.

Used by the save endpoints and the CLI so both produce the same
JSON/MJML/HTML triple for a given template.
"""

from dataclasses import dataclass, field
from typing import Any

from mailblocks.core.logging import get_logger
from mailblocks.domain.entities.email_template import EmailTemplate
from mailblocks.domain.services.mjml_compiler import compile_template
from mailblocks.domain.services.template_validator import validate_template
from mailblocks.infrastructure.services.mjml.html_renderer import (
    MjmlDiagnostic,
    MjmlRenderer,
)

logger = get_logger(__name__)


class TemplateValidationError(ValueError):
    """Raised when a template fails validation."""

    def __init__(self, errors: list[str]) -> None:
        self.errors = errors
        super().__init__(f"Template is invalid ({len(errors)} error(s))")


@dataclass
class PublishedTemplate:
    """A template in its three representations."""

    template: dict[str, Any]
    mjml: str
    html: str = ""
    diagnostics: list[MjmlDiagnostic] = field(default_factory=list)


class TemplatePublisher:
    """Turns a candidate template into persisted-ready output."""

    def __init__(self, renderer: MjmlRenderer, render_html: bool = True) -> None:
        self.renderer = renderer
        self.render_html = render_html

    def compile(self, candidate: Any) -> tuple[dict[str, Any], str]:
        """Validate and compile a candidate template.

        Returns:
            Tuple of (normalized template JSON, MJML markup).

        Raises:
            TemplateValidationError: If the candidate is invalid.
        """
        result = validate_template(candidate)
        if not result.valid:
            raise TemplateValidationError(result.errors)

        template = EmailTemplate.from_dict(candidate)
        return template.to_dict(), compile_template(template)

    async def publish(self, candidate: Any) -> PublishedTemplate:
        """Validate, compile and (when enabled) render a candidate template.

        Engine diagnostics do not fail the publish; they are returned with
        the result so the caller can surface them.

        Raises:
            TemplateValidationError: If the candidate is invalid.
        """
        template, mjml = self.compile(candidate)
        if not self.render_html:
            return PublishedTemplate(template=template, mjml=mjml)

        rendered = await self.renderer.render_async(mjml)
        if rendered.errors:
            logger.warning(
                "Template published with rendering diagnostics",
                diagnostic_count=len(rendered.errors),
            )
        return PublishedTemplate(
            template=template,
            mjml=mjml,
            html=rendered.html,
            diagnostics=rendered.errors,
        )
