"""Email-safe constraints shared by the template validator and the MJML compiler.

Every set here is a closed enumeration: email-client compatibility is decided
per discrete value (Outlook either renders a 12px radius or it doesn't), so
nothing is expressed as an open range unless the clients tolerate one.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping

# System-safe font stacks that every major client can fall back from
FONTS: tuple[tuple[str, str], ...] = (
    ("Arial, Helvetica, sans-serif", "Arial"),
    ("Georgia, serif", "Georgia"),
    ("Tahoma, sans-serif", "Tahoma"),
    ("Verdana, sans-serif", "Verdana"),
    ("Times New Roman, serif", "Times New Roman"),
    ("Courier New, monospace", "Courier New"),
    ("Trebuchet MS, sans-serif", "Trebuchet MS"),
    ("Lucida Sans Unicode, sans-serif", "Lucida Sans"),
)
DEFAULT_FONT_FAMILY = FONTS[0][0]

FONT_SIZES: tuple[int, ...] = (12, 14, 16, 18, 20, 24, 28, 32, 36, 48)

LINE_HEIGHTS: tuple[str, ...] = ("1.2", "1.4", "1.5", "1.6", "1.8")

# Outlook has issues with anything above 8px
BORDER_RADII: tuple[int, ...] = (0, 4, 8)

PADDING: Mapping[str, str] = MappingProxyType(
    {
        "none": "0px",
        "xs": "5px",
        "sm": "10px",
        "md": "20px",
        "lg": "30px",
        "xl": "40px",
    }
)
DEFAULT_PADDING = "md"

BUTTON_PADDING: Mapping[str, str] = MappingProxyType(
    {
        "sm": "10px 20px",
        "md": "15px 30px",
        "lg": "20px 40px",
    }
)

MAX_WIDTH = 600
MIN_CONTENT_WIDTH = 400
MAX_CONTENT_WIDTH = 700
MIN_COLUMN_WIDTH = 100

MIN_LOGO_WIDTH = 50
MAX_LOGO_WIDTH = 300

# Raster only: webp/avif/svg have poor legacy client support
IMAGE_FORMATS: tuple[str, ...] = ("jpg", "jpeg", "png", "gif")
IMAGE_MIME_TYPES: Mapping[str, tuple[str, ...]] = MappingProxyType(
    {
        "image/jpeg": ("jpg", "jpeg"),
        "image/png": ("png",),
        "image/gif": ("gif",),
    }
)
# Recognised image extensions that are rejected when they appear in a src URL
UNSUPPORTED_IMAGE_FORMATS: tuple[str, ...] = (
    "webp",
    "avif",
    "svg",
    "bmp",
    "tif",
    "tiff",
    "heic",
    "heif",
    "jxl",
    "ico",
)
MAX_IMAGE_SIZE_KB = 500
REQUIRE_IMAGE_ALT = True

SPACER_HEIGHTS: tuple[int, ...] = (10, 20, 30, 40, 50, 60)

DIVIDER_WIDTHS: tuple[int, ...] = (1, 2, 3)
DIVIDER_STYLES: tuple[str, ...] = ("solid", "dashed", "dotted")

COLUMN_COUNTS: tuple[int, ...] = (1, 2, 3, 4)
COLUMN_GAPS: tuple[str, ...] = ("none", "sm", "md", "lg")
VERTICAL_ALIGNS: tuple[str, ...] = ("top", "middle", "bottom")

ALIGNMENTS: tuple[str, ...] = ("left", "center", "right")
TEXT_ALIGNMENTS: tuple[str, ...] = ("left", "center", "right", "justify")

SOCIAL_ICON_SIZES: tuple[int, ...] = (24, 32, 40)
SOCIAL_ICON_STYLES: tuple[str, ...] = ("color", "black", "white")
SOCIAL_NETWORKS: tuple[str, ...] = (
    "facebook",
    "twitter",
    "linkedin",
    "instagram",
    "youtube",
)

# Top-level content blocks are depth 1; a columns block inside a columns
# block puts its children at depth 3.
MAX_NESTING_DEPTH = 3

UNSUBSCRIBE_PLACEHOLDER = "{{unsubscribe_url}}"


@dataclass(frozen=True)
class EmailConstraints:
    """Read-only view over the catalog, served to the editor so its pickers
    offer exactly the values the validator accepts.
    """

    fonts: tuple[tuple[str, str], ...] = FONTS
    font_sizes: tuple[int, ...] = FONT_SIZES
    line_heights: tuple[str, ...] = LINE_HEIGHTS
    border_radius: tuple[int, ...] = BORDER_RADII
    # mappingproxy is not hashable before 3.12, so it cannot be a plain default
    padding: Mapping[str, str] = field(default_factory=lambda: PADDING)
    button_padding: Mapping[str, str] = field(default_factory=lambda: BUTTON_PADDING)
    max_width: int = MAX_WIDTH
    content_width_bounds: tuple[int, int] = (MIN_CONTENT_WIDTH, MAX_CONTENT_WIDTH)
    min_column_width: int = MIN_COLUMN_WIDTH
    image_formats: tuple[str, ...] = IMAGE_FORMATS
    max_image_size_kb: int = MAX_IMAGE_SIZE_KB
    require_image_alt: bool = REQUIRE_IMAGE_ALT
    spacer_heights: tuple[int, ...] = SPACER_HEIGHTS
    divider_widths: tuple[int, ...] = DIVIDER_WIDTHS
    column_counts: tuple[int, ...] = COLUMN_COUNTS
    social_icon_sizes: tuple[int, ...] = SOCIAL_ICON_SIZES
    social_icon_styles: tuple[str, ...] = SOCIAL_ICON_STYLES
    social_networks: tuple[str, ...] = SOCIAL_NETWORKS

    def to_dict(self) -> dict[str, Any]:
        """JSON-ready catalog with the editor's camelCase keys."""
        return {
            "fonts": [{"value": value, "label": label} for value, label in self.fonts],
            "fontSizes": list(self.font_sizes),
            "lineHeights": list(self.line_heights),
            "borderRadius": list(self.border_radius),
            "padding": dict(self.padding),
            "buttonPadding": dict(self.button_padding),
            "maxWidth": self.max_width,
            "contentWidth": {
                "min": self.content_width_bounds[0],
                "max": self.content_width_bounds[1],
            },
            "minColumnWidth": self.min_column_width,
            "imageFormats": list(self.image_formats),
            "maxImageSizeKb": self.max_image_size_kb,
            "requireImageAlt": self.require_image_alt,
            "spacerHeights": list(self.spacer_heights),
            "dividerWidths": list(self.divider_widths),
            "columnCounts": list(self.column_counts),
            "socialIconSizes": list(self.social_icon_sizes),
            "socialIconStyles": list(self.social_icon_styles),
            "socialNetworks": list(self.social_networks),
        }


EMAIL_CONSTRAINTS = EmailConstraints()
