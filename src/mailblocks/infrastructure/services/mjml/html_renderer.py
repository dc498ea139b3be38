"""MJML to HTML rendering through the external ``mjml`` engine.

The engine is the only place markup becomes HTML. Whatever it reports, and
whatever it raises, is turned into a ``RenderResult`` so callers never have
to guard the call.
"""

import asyncio
import io
from dataclasses import dataclass, field
from typing import Any, Literal

from mjml import mjml_to_html

from mailblocks.core.config import get_settings
from mailblocks.core.logging import get_logger

logger = get_logger(__name__)

ValidationLevel = Literal["soft", "strict", "skip"]


@dataclass
class MjmlDiagnostic:
    """A single problem reported while rendering markup."""

    line: int
    message: str
    tag_name: str
    formatted_message: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "line": self.line,
            "message": self.message,
            "tagName": self.tag_name,
            "formattedMessage": self.formatted_message,
        }


@dataclass
class RenderResult:
    """Rendered HTML plus any diagnostics. ``html`` is empty on failure."""

    html: str
    errors: list[MjmlDiagnostic] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return bool(self.html) and not self.errors

    def to_dict(self) -> dict[str, Any]:
        return {"html": self.html, "errors": [e.to_dict() for e in self.errors]}


def _to_diagnostic(raw: Any) -> MjmlDiagnostic:
    if isinstance(raw, dict):
        message = str(raw.get("message") or "")
        return MjmlDiagnostic(
            line=int(raw.get("line") or 0),
            message=message,
            tag_name=str(raw.get("tagName") or raw.get("tag_name") or "mjml"),
            formatted_message=str(
                raw.get("formattedMessage") or raw.get("formatted_message") or message
            ),
        )
    message = str(raw)
    return MjmlDiagnostic(line=0, message=message, tag_name="mjml", formatted_message=message)


class MjmlRenderer:
    """Wrapper around the ``mjml`` engine.

    ``validation_level`` matches the MJML CLI's ``--config.validationLevel``: ``soft``
    returns HTML alongside diagnostics, ``strict`` withholds the HTML when
    the engine reported anything, and ``skip`` drops the diagnostics.
    """

    def __init__(self, validation_level: ValidationLevel = "soft") -> None:
        self.validation_level = validation_level

    def render(self, markup: str) -> RenderResult:
        """Render MJML markup to HTML.

        Args:
            markup: MJML document, normally produced by the compiler.

        Returns:
            RenderResult: Never raises; engine failures come back as an empty
            ``html`` with one diagnostic.
        """
        try:
            result = mjml_to_html(io.StringIO(markup))
        except Exception as e:
            logger.error("MJML rendering failed", error=str(e), markup_length=len(markup))
            return RenderResult(
                html="",
                errors=[
                    MjmlDiagnostic(
                        line=0,
                        message=str(e) or "Unknown error",
                        tag_name="mjml",
                        formatted_message=f"MJML compilation error: {e}",
                    )
                ],
            )

        html = result.html or ""
        errors = [_to_diagnostic(raw) for raw in (result.errors or [])]

        if self.validation_level == "skip":
            errors = []
        elif errors:
            logger.warning(
                "MJML rendered with diagnostics",
                error_count=len(errors),
                validation_level=self.validation_level,
            )
            if self.validation_level == "strict":
                html = ""

        logger.debug("MJML rendered", html_length=len(html))
        return RenderResult(html=html, errors=errors)

    async def render_async(self, markup: str) -> RenderResult:
        """Render off the event loop; the engine is synchronous."""
        return await asyncio.to_thread(self.render, markup)


# Global renderer instance
_mjml_renderer: MjmlRenderer | None = None


def get_mjml_renderer() -> MjmlRenderer:
    """Get the global MJML renderer instance.

    Returns:
        MjmlRenderer: Renderer configured from application settings.
    """
    global _mjml_renderer
    if _mjml_renderer is None:
        _mjml_renderer = MjmlRenderer(validation_level=get_settings().mjml_validation_level)
    return _mjml_renderer
