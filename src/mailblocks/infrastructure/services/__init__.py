"""Infrastructure services."""

from mailblocks.infrastructure.services.template_publisher import (
    PublishedTemplate,
    TemplatePublisher,
    TemplateValidationError,
)

__all__ = ["PublishedTemplate", "TemplatePublisher", "TemplateValidationError"]
