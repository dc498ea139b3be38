"""MJML compiler for email templates.

Lowers a validated ``EmailTemplate`` into MJML markup. The compiler trusts its
input: it does not re-validate, and feeding it an unvalidated document yields
undefined markup rather than an error.

All user-supplied free text is HTML-escaped before interpolation, with one
exception: ``EmailText.content`` is user-authored rich text and is emitted
verbatim.
"""

import math
from typing import Any, Callable, Sequence

from mailblocks.core.logging import get_logger
from mailblocks.domain.constraints import (
    BUTTON_PADDING,
    DEFAULT_PADDING,
    PADDING,
    UNSUBSCRIBE_PLACEHOLDER,
)
from mailblocks.domain.entities.blocks import (
    Block,
    BlockType,
    ButtonProps,
    ColumnsProps,
    DividerProps,
    EmailColumns,
    FooterProps,
    HeaderProps,
    ImageProps,
    SocialProps,
    SpacerProps,
    TextProps,
)
from mailblocks.domain.entities.email_template import EmailTemplate

logger = get_logger(__name__)

EMPTY_COLUMN_MARKER = "<!-- Empty column -->"

_SECTION_INDENT = " " * 4
_COLUMN_INDENT = " " * 6
_ELEMENT_INDENT = " " * 8

_MONOCHROME_ICON_BACKGROUNDS = {"black": "#000000", "white": "#ffffff"}

_ESCAPES = (
    ("&", "&amp;"),
    ("<", "&lt;"),
    (">", "&gt;"),
    ('"', "&quot;"),
    ("'", "&#039;"),
)


def escape_html(text: str | None) -> str:
    """Escape the five HTML special characters. ``None`` becomes ``""``."""
    if not text:
        return ""
    for char, entity in _ESCAPES:
        text = text.replace(char, entity)
    return text


def unescape_html(text: str) -> str:
    """Inverse of ``escape_html``."""
    for char, entity in reversed(_ESCAPES):
        text = text.replace(entity, char)
    return text


def resolve_padding(key: str | None) -> str:
    """Resolve a padding size name, falling back to ``md`` for unknown keys."""
    return PADDING.get(key or "", PADDING[DEFAULT_PADDING])


def resolve_button_padding(key: str | None) -> str:
    return BUTTON_PADDING.get(key or "", BUTTON_PADDING[DEFAULT_PADDING])


def split_into_columns(children: Sequence[Block], column_count: int) -> list[list[Block]]:
    """Split a flat child sequence into contiguous, near-equal chunks.

    Each chunk holds ``ceil(len / column_count)`` items; trailing chunks may
    be shorter or empty. Exactly ``column_count`` chunks are returned.
    """
    per_column = math.ceil(len(children) / column_count) if children else 0
    return [
        list(children[i * per_column : (i + 1) * per_column])
        for i in range(column_count)
    ]


def _num(value: Any) -> Any:
    # 600.0 from a JSON float renders as "600", not "600.0"
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


def _element(tag: str, attrs: list[tuple[str, Any]], body: str | None = None) -> str:
    """Render one MJML element with one attribute per line.

    Attributes whose value is ``None`` are omitted.
    """
    lines = [f"{_ELEMENT_INDENT}<{tag}"]
    lines.extend(
        f'{_ELEMENT_INDENT}  {name}="{value}"' for name, value in attrs if value is not None
    )
    if body is None:
        lines.append(f"{_ELEMENT_INDENT}/>")
    else:
        lines.append(f"{_ELEMENT_INDENT}>{body}</{tag}>")
    return "\n".join(lines)


def _section(elements: str, attrs: list[tuple[str, Any]] | None = None) -> str:
    rendered_attrs = "".join(
        f' {name}="{value}"' for name, value in attrs or [] if value is not None
    )
    return (
        f"{_SECTION_INDENT}<mj-section{rendered_attrs}>\n"
        f"{_COLUMN_INDENT}<mj-column>\n"
        f"{elements}\n"
        f"{_COLUMN_INDENT}</mj-column>\n"
        f"{_SECTION_INDENT}</mj-section>"
    )


class MjmlCompiler:
    """Compiles email templates into MJML.

    Every block renderer takes ``nested``: at the top level a block becomes a
    full ``mj-section``/``mj-column`` fragment; inside a columns block only
    its content elements are emitted, with section-level attributes (padding,
    background) moved onto the element.
    """

    @classmethod
    def compile(cls, template: EmailTemplate) -> str:
        """Compile a validated template into an MJML document.

        Args:
            template: A template that already passed validation.

        Returns:
            str: The MJML markup.
        """
        metadata = template.metadata
        settings = template.settings

        fragments = [cls.render_block(block) for block in template.content]
        body = "\n".join(fragment for fragment in fragments if fragment)

        mjml = (
            "<mjml>\n"
            "  <mj-head>\n"
            f"    <mj-title>{escape_html(metadata.subject)}</mj-title>\n"
            f"    <mj-preview>{escape_html(metadata.preheader)}</mj-preview>\n"
            "    <mj-attributes>\n"
            f'      <mj-all font-family="{escape_html(settings.font_family)}" />\n'
            f'      <mj-body background-color="{escape_html(settings.background_color)}" />\n'
            '      <mj-section padding="0" />\n'
            "    </mj-attributes>\n"
            "  </mj-head>\n"
            f'  <mj-body width="{_num(settings.content_width)}px">\n'
            + (f"{body}\n" if body else "")
            + "  </mj-body>\n"
            "</mjml>"
        )

        logger.debug(
            "Template compiled",
            block_count=len(template.content),
            mjml_length=len(mjml),
        )
        return mjml

    @classmethod
    def render_block(cls, block: Block, nested: bool = False) -> str:
        """Render a single block. Returns ``""`` when the block emits nothing."""
        if isinstance(block, EmailColumns):
            return cls.render_columns(block.props, block.children, nested)
        renderer: Callable[[Any, bool], str] = getattr(cls, _RENDERERS[block.type])
        return renderer(block.props, nested)

    @classmethod
    def render_header(cls, props: HeaderProps, nested: bool = False) -> str:
        padding = resolve_padding(props.padding)
        background = escape_html(props.background_color)
        element = _element(
            "mj-image",
            [
                ("src", escape_html(props.logo_url)),
                ("alt", escape_html(props.logo_alt or "Logo")),
                ("width", f"{_num(props.logo_width)}px"),
                ("align", props.align),
                ("container-background-color", background if nested else None),
                ("padding", padding if nested else None),
            ],
        )
        if nested:
            return element
        return _section(element, [("background-color", background), ("padding", padding)])

    @classmethod
    def render_text(cls, props: TextProps, nested: bool = False) -> str:
        padding = resolve_padding(props.padding)
        element = _element(
            "mj-text",
            [
                ("font-size", f"{_num(props.font_size)}px"),
                ("font-family", escape_html(props.font_family)),
                ("color", escape_html(props.color)),
                ("align", props.align),
                ("line-height", props.line_height),
                ("padding", padding if nested else None),
            ],
            body=props.content or "",
        )
        if nested:
            return element
        return _section(element, [("padding", padding)])

    @classmethod
    def render_image(cls, props: ImageProps, nested: bool = False) -> str:
        padding = resolve_padding(props.padding)
        if props.width == "full" or props.width == 0:
            width = "100%"
        else:
            width = f"{_num(props.width)}px"
        element = _element(
            "mj-image",
            [
                ("src", escape_html(props.src)),
                ("alt", escape_html(props.alt)),
                ("width", width),
                ("align", props.align),
                ("href", escape_html(props.href) if props.href else None),
                ("padding", padding if nested else None),
            ],
        )
        if nested:
            return element
        return _section(element, [("padding", padding)])

    @classmethod
    def render_button(cls, props: ButtonProps, nested: bool = False) -> str:
        element = _element(
            "mj-button",
            [
                ("href", escape_html(props.href)),
                ("background-color", escape_html(props.background_color)),
                ("color", escape_html(props.text_color)),
                ("font-size", f"{_num(props.font_size)}px"),
                ("border-radius", f"{_num(props.border_radius)}px"),
                ("align", props.align),
                ("padding", resolve_button_padding(props.padding)),
                ("width", "100%" if props.full_width else None),
            ],
            body=escape_html(props.text),
        )
        if nested:
            return element
        return _section(element)

    @classmethod
    def render_columns(
        cls, props: ColumnsProps, children: Sequence[Block], nested: bool = False
    ) -> str:
        if nested:
            # mj-section cannot live inside mj-column; inner columns are
            # flattened into the enclosing column in order.
            fragments = [cls.render_block(child, nested=True) for child in children]
            return "\n".join(fragment for fragment in fragments if fragment)

        columns = []
        for chunk in split_into_columns(children, int(props.columns)):
            fragments = [cls.render_block(child, nested=True) for child in chunk]
            content = "\n".join(fragment for fragment in fragments if fragment)
            columns.append(
                f'{_COLUMN_INDENT}<mj-column vertical-align="{props.vertical_align}">\n'
                f"{content or _ELEMENT_INDENT + EMPTY_COLUMN_MARKER}\n"
                f"{_COLUMN_INDENT}</mj-column>"
            )

        stack_attr = "" if props.stack_on_mobile else ' mj-class="no-stack"'
        return (
            f"{_SECTION_INDENT}<mj-section{stack_attr}>\n"
            + "\n".join(columns)
            + f"\n{_SECTION_INDENT}</mj-section>"
        )

    @classmethod
    def render_spacer(cls, props: SpacerProps, nested: bool = False) -> str:
        element = _element("mj-spacer", [("height", f"{_num(props.height)}px")])
        if nested:
            return element
        return _section(element)

    @classmethod
    def render_divider(cls, props: DividerProps, nested: bool = False) -> str:
        padding = resolve_padding(props.padding)
        element = _element(
            "mj-divider",
            [
                ("border-color", escape_html(props.color)),
                ("border-width", f"{_num(props.width)}px"),
                ("border-style", props.style),
                ("padding", padding if nested else None),
            ],
        )
        if nested:
            return element
        return _section(element, [("padding", padding)])

    @classmethod
    def render_social(cls, props: SocialProps, nested: bool = False) -> str:
        icon_size = f"{_num(props.icon_size)}px"
        # Branded colors come from the engine's defaults; monochrome styles
        # override the icon background.
        background = _MONOCHROME_ICON_BACKGROUNDS.get(props.icon_style)
        background_attr = f' background-color="{background}"' if background else ""
        networks = [
            f'{_ELEMENT_INDENT}  <mj-social-element name="{network.type}" '
            f'href="{escape_html(network.url)}" icon-size="{icon_size}"{background_attr} />'
            for network in props.networks
            if network.url
        ]
        if not networks:
            return ""

        mode = "vertical" if props.icon_style == "color" else "horizontal"
        element = (
            f'{_ELEMENT_INDENT}<mj-social align="{props.align}" mode="{mode}">\n'
            + "\n".join(networks)
            + f"\n{_ELEMENT_INDENT}</mj-social>"
        )
        if nested:
            return element
        return _section(element)

    @classmethod
    def render_footer(cls, props: FooterProps, nested: bool = False) -> str:
        background = escape_html(props.background_color)
        text_color = escape_html(props.text_color)
        inner = _ELEMENT_INDENT + "  "
        address = escape_html(props.address).replace("\n", "<br/>")
        lines = [
            f"{inner}<strong>{escape_html(props.company_name)}</strong><br/>",
            f"{inner}{address}",
        ]
        if props.show_unsubscribe:
            lines.append(
                f'{inner}<br/><a href="{UNSUBSCRIBE_PLACEHOLDER}" '
                f'style="color: {text_color}; text-decoration: underline;">'
                f"{escape_html(props.unsubscribe_text or 'Unsubscribe')}</a>"
            )
        body = "\n" + "\n".join(lines) + "\n" + _ELEMENT_INDENT

        element = _element(
            "mj-text",
            [
                ("font-size", "12px"),
                ("color", text_color),
                ("align", "center"),
                ("line-height", "1.6"),
                ("container-background-color", background if nested else None),
            ],
            body=body,
        )
        if nested:
            return element
        return _section(element, [("background-color", background)])


_RENDERERS: dict[BlockType, str] = {
    BlockType.HEADER: "render_header",
    BlockType.TEXT: "render_text",
    BlockType.IMAGE: "render_image",
    BlockType.BUTTON: "render_button",
    BlockType.SPACER: "render_spacer",
    BlockType.DIVIDER: "render_divider",
    BlockType.SOCIAL: "render_social",
    BlockType.FOOTER: "render_footer",
}


def compile_template(template: EmailTemplate) -> str:
    """Compile a validated template into MJML. See ``MjmlCompiler.compile``."""
    return MjmlCompiler.compile(template)
