"""Domain services for MailBlocks.

Services contain the template validation, compilation and editor-conversion
logic. They have no dependencies on infrastructure or external frameworks.
"""

from mailblocks.domain.services.editor_adapter import from_editor_data, to_editor_data
from mailblocks.domain.services.mjml_compiler import (
    EMPTY_COLUMN_MARKER,
    MjmlCompiler,
    compile_template,
    escape_html,
    resolve_button_padding,
    resolve_padding,
    split_into_columns,
    unescape_html,
)
from mailblocks.domain.services.template_validator import (
    TemplateValidator,
    ValidationResult,
    validate_template,
)

__all__ = [
    "EMPTY_COLUMN_MARKER",
    "MjmlCompiler",
    "TemplateValidator",
    "ValidationResult",
    "compile_template",
    "escape_html",
    "from_editor_data",
    "resolve_button_padding",
    "resolve_padding",
    "split_into_columns",
    "to_editor_data",
    "unescape_html",
    "validate_template",
]
