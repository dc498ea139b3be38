"""Template validation service for structural and email-safety checks.

Validates arbitrary, possibly externally-sourced data against the email
document model and the constraint catalog. Validation never raises: every
problem is reported as a human-readable message prefixed with the path of the
offending node (``content[2].props.alt``), in a deterministic order.
"""

from dataclasses import dataclass, field
from pathlib import PurePosixPath
from typing import Any
from urllib.parse import urlparse

from mailblocks.core.logging import get_logger
from mailblocks.domain.constraints import (
    ALIGNMENTS,
    BORDER_RADII,
    BUTTON_PADDING,
    COLUMN_COUNTS,
    COLUMN_GAPS,
    DIVIDER_STYLES,
    DIVIDER_WIDTHS,
    FONT_SIZES,
    LINE_HEIGHTS,
    MAX_CONTENT_WIDTH,
    MAX_LOGO_WIDTH,
    MAX_NESTING_DEPTH,
    MAX_WIDTH,
    MIN_CONTENT_WIDTH,
    MIN_LOGO_WIDTH,
    PADDING,
    REQUIRE_IMAGE_ALT,
    SOCIAL_ICON_SIZES,
    SOCIAL_ICON_STYLES,
    SOCIAL_NETWORKS,
    SPACER_HEIGHTS,
    TEXT_ALIGNMENTS,
    UNSUPPORTED_IMAGE_FORMATS,
    VERTICAL_ALIGNS,
)
from mailblocks.domain.entities.blocks import BLOCK_TYPE_NAMES, BlockType
from mailblocks.domain.entities.email_template import TEMPLATE_VERSION

logger = get_logger(__name__)


@dataclass
class ValidationResult:
    """Outcome of validating a template candidate."""

    valid: bool
    errors: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {"valid": self.valid, "errors": list(self.errors)}


def _is_number(value: Any) -> bool:
    # bool is an int subclass; True must not pass as 1
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_array(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def _format_options(options: Any) -> str:
    return ", ".join(str(option) for option in options)


class TemplateValidator:
    """Validator for email template documents.

    Every ``validate_*`` method returns a list of error messages (empty if
    valid). Optional props that are absent or null are treated as not
    specified and skipped; required props are checked by truthiness, so an
    empty string counts as missing.
    """

    @classmethod
    def validate_version(cls, version: Any) -> list[str]:
        if version != TEMPLATE_VERSION:
            return [f'Unsupported version: {version}. Expected "{TEMPLATE_VERSION}"']
        return []

    @classmethod
    def validate_metadata(cls, metadata: Any) -> list[str]:
        if not isinstance(metadata, dict):
            return ["Missing or invalid metadata"]

        errors = []
        for key in ("subject", "preheader"):
            if not isinstance(metadata.get(key), str):
                errors.append(f"metadata.{key} must be a string")
        return errors

    @classmethod
    def validate_settings(cls, settings: Any) -> list[str]:
        if not isinstance(settings, dict):
            return ["Missing or invalid settings"]

        errors = []
        if not isinstance(settings.get("backgroundColor"), str):
            errors.append("settings.backgroundColor must be a string")

        content_width = settings.get("contentWidth")
        if not _is_number(content_width):
            errors.append("settings.contentWidth must be a number")
        elif not MIN_CONTENT_WIDTH <= content_width <= MAX_CONTENT_WIDTH:
            errors.append(
                f"settings.contentWidth must be between {MIN_CONTENT_WIDTH} "
                f"and {MAX_CONTENT_WIDTH}"
            )

        if not isinstance(settings.get("fontFamily"), str):
            errors.append("settings.fontFamily must be a string")
        return errors

    # --- Field helpers ---

    @staticmethod
    def _check_choice(
        props: dict, key: str, options: Any, prefix: str, numeric: bool = False
    ) -> list[str]:
        """Check an optional enumerated prop against a closed set."""
        value = props.get(key)
        if value is None:
            return []
        type_ok = _is_number(value) if numeric else isinstance(value, str)
        if not type_ok or value not in options:
            return [f"{prefix}.props.{key} must be one of: {_format_options(options)}"]
        return []

    @staticmethod
    def _check_bool(props: dict, key: str, prefix: str) -> list[str]:
        value = props.get(key)
        if value is not None and not isinstance(value, bool):
            return [f"{prefix}.props.{key} must be a boolean"]
        return []

    @staticmethod
    def _check_string(props: dict, key: str, prefix: str) -> list[str]:
        value = props.get(key)
        if value is not None and not isinstance(value, str):
            return [f"{prefix}.props.{key} must be a string"]
        return []

    @staticmethod
    def _check_required(props: dict, key: str, prefix: str, message: str = "is required") -> list[str]:
        value = props.get(key)
        if not (isinstance(value, str) and value):
            return [f"{prefix}.props.{key} {message}"]
        return []

    # --- Per-type rules ---

    @classmethod
    def validate_header_props(cls, props: dict, prefix: str) -> list[str]:
        errors = []

        logo_width = props.get("logoWidth")
        if logo_width is not None and (
            not _is_number(logo_width) or not MIN_LOGO_WIDTH <= logo_width <= MAX_LOGO_WIDTH
        ):
            errors.append(
                f"{prefix}.props.logoWidth must be between {MIN_LOGO_WIDTH} and {MAX_LOGO_WIDTH}"
            )

        errors.extend(cls._check_string(props, "logoUrl", prefix))
        errors.extend(cls._check_string(props, "logoAlt", prefix))
        errors.extend(cls._check_choice(props, "align", ALIGNMENTS, prefix))
        errors.extend(cls._check_choice(props, "padding", tuple(PADDING), prefix))
        return errors

    @classmethod
    def validate_text_props(cls, props: dict, prefix: str) -> list[str]:
        errors = []
        errors.extend(cls._check_string(props, "content", prefix))
        errors.extend(cls._check_choice(props, "fontSize", FONT_SIZES, prefix, numeric=True))
        errors.extend(cls._check_choice(props, "lineHeight", LINE_HEIGHTS, prefix))
        errors.extend(cls._check_choice(props, "align", TEXT_ALIGNMENTS, prefix))
        errors.extend(cls._check_choice(props, "padding", tuple(PADDING), prefix))
        return errors

    @classmethod
    def validate_image_props(cls, props: dict, prefix: str) -> list[str]:
        errors = []

        if REQUIRE_IMAGE_ALT:
            errors.extend(
                cls._check_required(props, "alt", prefix, "is required for accessibility")
            )

        width = props.get("width")
        if width is not None and width != "full":
            if not _is_number(width) or not 0 <= width <= MAX_WIDTH:
                errors.append(
                    f"{prefix}.props.width must be \"full\" or between 0 and {MAX_WIDTH}"
                )

        src = props.get("src")
        if src is not None:
            if not isinstance(src, str):
                errors.append(f"{prefix}.props.src must be a string")
            elif not src.startswith("data:"):
                try:
                    path = urlparse(src).path
                except ValueError:
                    path = ""
                    errors.append(f"{prefix}.props.src must be a valid URL")
                extension = PurePosixPath(path).suffix.lower().lstrip(".")
                if extension in UNSUPPORTED_IMAGE_FORMATS:
                    errors.append(
                        f"{prefix}.props.src uses unsupported image format '{extension}'"
                    )

        errors.extend(cls._check_string(props, "href", prefix))
        errors.extend(cls._check_choice(props, "align", ALIGNMENTS, prefix))
        errors.extend(cls._check_choice(props, "padding", tuple(PADDING), prefix))
        return errors

    @classmethod
    def validate_button_props(cls, props: dict, prefix: str) -> list[str]:
        errors = []
        errors.extend(cls._check_required(props, "text", prefix))
        errors.extend(cls._check_required(props, "href", prefix))
        errors.extend(
            cls._check_choice(props, "borderRadius", BORDER_RADII, prefix, numeric=True)
        )
        errors.extend(cls._check_choice(props, "fontSize", FONT_SIZES, prefix, numeric=True))
        errors.extend(cls._check_choice(props, "align", ALIGNMENTS, prefix))
        errors.extend(cls._check_choice(props, "padding", tuple(BUTTON_PADDING), prefix))
        errors.extend(cls._check_bool(props, "fullWidth", prefix))
        return errors

    @classmethod
    def validate_columns_props(cls, props: dict, prefix: str) -> list[str]:
        errors = []
        errors.extend(cls._check_choice(props, "columns", COLUMN_COUNTS, prefix, numeric=True))
        errors.extend(cls._check_choice(props, "gap", COLUMN_GAPS, prefix))
        errors.extend(cls._check_choice(props, "verticalAlign", VERTICAL_ALIGNS, prefix))
        errors.extend(cls._check_bool(props, "stackOnMobile", prefix))
        return errors

    @classmethod
    def validate_spacer_props(cls, props: dict, prefix: str) -> list[str]:
        return cls._check_choice(props, "height", SPACER_HEIGHTS, prefix, numeric=True)

    @classmethod
    def validate_divider_props(cls, props: dict, prefix: str) -> list[str]:
        errors = []
        errors.extend(cls._check_string(props, "color", prefix))
        errors.extend(cls._check_choice(props, "width", DIVIDER_WIDTHS, prefix, numeric=True))
        errors.extend(cls._check_choice(props, "style", DIVIDER_STYLES, prefix))
        errors.extend(cls._check_choice(props, "padding", tuple(PADDING), prefix))
        return errors

    @classmethod
    def validate_social_props(cls, props: dict, prefix: str) -> list[str]:
        errors = []
        errors.extend(
            cls._check_choice(props, "iconSize", SOCIAL_ICON_SIZES, prefix, numeric=True)
        )
        errors.extend(cls._check_choice(props, "iconStyle", SOCIAL_ICON_STYLES, prefix))
        errors.extend(cls._check_choice(props, "align", ALIGNMENTS, prefix))

        networks = props.get("networks")
        if networks is not None:
            if not _is_array(networks):
                errors.append(f"{prefix}.props.networks must be an array")
            else:
                for i, network in enumerate(networks):
                    network_path = f"{prefix}.props.networks[{i}]"
                    if not isinstance(network, dict):
                        errors.append(f"{network_path} must be an object")
                        continue
                    if network.get("type") not in SOCIAL_NETWORKS:
                        errors.append(
                            f"{network_path}.type must be one of: "
                            f"{_format_options(SOCIAL_NETWORKS)}"
                        )
                    url = network.get("url")
                    if url is not None and not isinstance(url, str):
                        errors.append(f"{network_path}.url must be a string")

        # Flat per-network fields as produced by the editor
        for name in SOCIAL_NETWORKS:
            errors.extend(cls._check_string(props, f"{name}Url", prefix))
        return errors

    @classmethod
    def validate_footer_props(cls, props: dict, prefix: str) -> list[str]:
        errors = []
        for key in ("companyName", "address", "unsubscribeText", "backgroundColor", "textColor"):
            errors.extend(cls._check_string(props, key, prefix))
        errors.extend(cls._check_bool(props, "showUnsubscribe", prefix))
        return errors

    # --- Blocks ---

    @classmethod
    def validate_block(cls, block: Any, prefix: str, depth: int = 1) -> list[str]:
        """Validate a single block and, for columns, its children.

        Args:
            block: The candidate block.
            prefix: Path of the block, e.g. ``content[3]``.
            depth: Nesting depth, 1 for top-level content.

        Returns:
            List of validation errors (empty if valid).
        """
        if depth > MAX_NESTING_DEPTH:
            return [f"{prefix}: Block nesting exceeds maximum depth of {MAX_NESTING_DEPTH}"]

        if not isinstance(block, dict):
            return [f"{prefix}: Block must be an object"]

        block_type = block.get("type")
        if not isinstance(block_type, str) or block_type not in BLOCK_TYPE_NAMES:
            return [f'{prefix}: Invalid block type "{block_type}"']

        props = block.get("props")
        if not isinstance(props, dict):
            return [f"{prefix}: Block must have props object"]

        rule = _PROPS_RULES[BlockType(block_type)]
        errors = getattr(cls, rule)(props, prefix)

        if block_type == BlockType.COLUMNS.value:
            children = block.get("children")
            if children is not None:
                if not _is_array(children):
                    errors.append(f"{prefix}.children must be an array")
                else:
                    for i, child in enumerate(children):
                        errors.extend(
                            cls.validate_block(child, f"{prefix}.children[{i}]", depth + 1)
                        )

        return errors

    @classmethod
    def validate_content(cls, content: Any) -> list[str]:
        if not _is_array(content):
            return ["content must be an array"]

        errors = []
        for i, block in enumerate(content):
            errors.extend(cls.validate_block(block, f"content[{i}]"))
        return errors

    @classmethod
    def validate(cls, candidate: Any) -> ValidationResult:
        """Validate a complete template candidate.

        Checks accumulate rather than short-circuit: version, metadata,
        settings, content array, then each block in order.

        Args:
            candidate: Any value, typically decoded JSON.

        Returns:
            ValidationResult: ``valid`` plus the ordered error messages.
        """
        if not isinstance(candidate, dict):
            return ValidationResult(valid=False, errors=["Template must be an object"])

        errors = []
        errors.extend(cls.validate_version(candidate.get("version")))
        errors.extend(cls.validate_metadata(candidate.get("metadata")))
        errors.extend(cls.validate_settings(candidate.get("settings")))
        errors.extend(cls.validate_content(candidate.get("content")))

        logger.debug("Template validated", valid=not errors, error_count=len(errors))
        return ValidationResult(valid=not errors, errors=errors)


_PROPS_RULES: dict[BlockType, str] = {
    BlockType.HEADER: "validate_header_props",
    BlockType.TEXT: "validate_text_props",
    BlockType.IMAGE: "validate_image_props",
    BlockType.BUTTON: "validate_button_props",
    BlockType.COLUMNS: "validate_columns_props",
    BlockType.SPACER: "validate_spacer_props",
    BlockType.DIVIDER: "validate_divider_props",
    BlockType.SOCIAL: "validate_social_props",
    BlockType.FOOTER: "validate_footer_props",
}


def validate_template(candidate: Any) -> ValidationResult:
    """Validate a template candidate. See ``TemplateValidator.validate``."""
    return TemplateValidator.validate(candidate)
