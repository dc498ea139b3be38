"""Email template entity, the root aggregate of the document model.

A template is metadata (subject, preheader), global settings, and an ordered
sequence of blocks. It is persisted and transmitted as JSON; ``version`` is
always the literal ``"1.0"``.
"""

from dataclasses import dataclass, field
from typing import Any

from mailblocks.domain.constraints import DEFAULT_FONT_FAMILY, MAX_WIDTH
from mailblocks.domain.entities.blocks import Block, block_from_dict, block_to_dict

TEMPLATE_VERSION = "1.0"


@dataclass
class TemplateMetadata:
    """Free-text metadata, HTML-escaped at compile time."""

    subject: str = ""
    preheader: str = ""


@dataclass
class TemplateSettings:
    """Global settings applied to the whole email.

    ``content_width`` bounds are enforced by the validator, not here, because
    documents may arrive from untrusted sources.
    """

    background_color: str = "#ffffff"
    content_width: int = MAX_WIDTH
    font_family: str = DEFAULT_FONT_FAMILY


@dataclass
class EmailTemplate:
    """Email template entity.

    Attributes:
        metadata: Subject and preheader.
        settings: Background color, content width and default font.
        content: Ordered blocks. A block has no identity beyond its position.
        version: Document format version, always "1.0".
    """

    metadata: TemplateMetadata = field(default_factory=TemplateMetadata)
    settings: TemplateSettings = field(default_factory=TemplateSettings)
    content: list[Block] = field(default_factory=list)
    version: str = TEMPLATE_VERSION

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "EmailTemplate":
        """Build a template from JSON that already passed validation.

        Unknown top-level fields are ignored.
        """
        metadata = data.get("metadata") or {}
        settings = data.get("settings") or {}
        return cls(
            metadata=TemplateMetadata(
                subject=metadata.get("subject", ""),
                preheader=metadata.get("preheader", ""),
            ),
            settings=TemplateSettings(
                background_color=settings.get("backgroundColor", "#ffffff"),
                content_width=settings.get("contentWidth", MAX_WIDTH),
                font_family=settings.get("fontFamily", DEFAULT_FONT_FAMILY),
            ),
            content=[block_from_dict(block) for block in data.get("content") or []],
            version=data.get("version", TEMPLATE_VERSION),
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the persisted JSON shape."""
        return {
            "version": self.version,
            "metadata": {
                "subject": self.metadata.subject,
                "preheader": self.metadata.preheader,
            },
            "settings": {
                "backgroundColor": self.settings.background_color,
                "contentWidth": self.settings.content_width,
                "fontFamily": self.settings.font_family,
            },
            "content": [block_to_dict(block) for block in self.content],
        }
