"""Block entities for email templates.

A template's content is a sequence of blocks. Each block variant carries a
strongly-typed props payload; ``EmailColumns`` additionally owns an ordered
list of child blocks, which is the only recursive structure in the model.

Props attributes are snake_case and map 1:1 onto the camelCase keys used by
the persisted JSON (``logo_url`` <-> ``logoUrl``). Field defaults mirror the
defaults the editor gives a freshly dropped block.
"""

from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any, ClassVar, Union

from mailblocks.domain.constraints import DEFAULT_FONT_FAMILY, SOCIAL_NETWORKS


class BlockType(str, Enum):
    """Closed set of block variants."""

    HEADER = "EmailHeader"
    TEXT = "EmailText"
    IMAGE = "EmailImage"
    BUTTON = "EmailButton"
    COLUMNS = "EmailColumns"
    SPACER = "EmailSpacer"
    DIVIDER = "EmailDivider"
    SOCIAL = "EmailSocial"
    FOOTER = "EmailFooter"


BLOCK_TYPE_NAMES: tuple[str, ...] = tuple(t.value for t in BlockType)


def to_camel(name: str) -> str:
    """Convert a snake_case attribute name to its camelCase JSON key."""
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


class BlockProps:
    """Mixin giving props dataclasses their JSON conversion."""

    @classmethod
    def from_dict(cls, data: dict[str, Any]):
        """Build props from a validated JSON mapping.

        Absent or null keys fall back to the field default; unknown keys
        are ignored.
        """
        kwargs = {}
        for f in fields(cls):
            value = data.get(to_camel(f.name))
            if value is not None:
                kwargs[f.name] = value
        return cls(**kwargs)

    def to_dict(self) -> dict[str, Any]:
        return {to_camel(f.name): getattr(self, f.name) for f in fields(self)}


@dataclass
class HeaderProps(BlockProps):
    logo_url: str = ""
    logo_alt: str = "Company Logo"
    logo_width: int = 150
    background_color: str = "#ffffff"
    align: str = "center"
    padding: str = "md"


@dataclass
class TextProps(BlockProps):
    """Text block props.

    ``content`` is user-authored rich text and is emitted verbatim.
    """

    content: str = "Your text here..."
    font_size: int = 16
    font_family: str = DEFAULT_FONT_FAMILY
    color: str = "#333333"
    align: str = "left"
    line_height: str = "1.5"
    padding: str = "md"


@dataclass
class ImageProps(BlockProps):
    """Image block props.

    ``width`` is a pixel count, or ``0`` / ``"full"`` for full width.
    """

    src: str = ""
    alt: str = ""
    width: int | str = 0
    align: str = "center"
    href: str | None = None
    padding: str = "md"

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        if self.href is None:
            del data["href"]
        return data


@dataclass
class ButtonProps(BlockProps):
    text: str = "Click Here"
    href: str = "#"
    background_color: str = "#007bff"
    text_color: str = "#ffffff"
    font_size: int = 16
    border_radius: int = 4
    align: str = "center"
    full_width: bool = False
    padding: str = "md"


@dataclass
class ColumnsProps(BlockProps):
    columns: int = 2
    gap: str = "md"
    vertical_align: str = "top"
    stack_on_mobile: bool = True


@dataclass
class SpacerProps(BlockProps):
    height: int = 20


@dataclass
class DividerProps(BlockProps):
    color: str = "#e0e0e0"
    width: int = 1
    style: str = "solid"
    padding: str = "md"


@dataclass
class SocialNetwork:
    type: str
    url: str = ""


@dataclass
class SocialProps(BlockProps):
    """Social icon row props.

    Networks are stored as an ordered list. The editor works with one flat
    ``<network>Url`` field per network instead; both shapes are accepted.
    """

    networks: list[SocialNetwork] = field(default_factory=list)
    icon_size: int = 32
    align: str = "center"
    icon_style: str = "color"

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SocialProps":
        props = cls(
            icon_size=data.get("iconSize") or 32,
            align=data.get("align") or "center",
            icon_style=data.get("iconStyle") or "color",
        )
        raw_networks = data.get("networks")
        if isinstance(raw_networks, list):
            props.networks = [
                SocialNetwork(type=item["type"], url=item.get("url") or "")
                for item in raw_networks
                if isinstance(item, dict) and item.get("type")
            ]
        # Flat editor fields fill in networks the list does not mention
        listed = {network.type for network in props.networks}
        props.networks.extend(
            SocialNetwork(type=name, url=data[f"{name}Url"])
            for name in SOCIAL_NETWORKS
            if name not in listed and data.get(f"{name}Url")
        )
        return props

    def to_dict(self) -> dict[str, Any]:
        return {
            "networks": [{"type": n.type, "url": n.url} for n in self.networks],
            "iconSize": self.icon_size,
            "align": self.align,
            "iconStyle": self.icon_style,
        }


@dataclass
class FooterProps(BlockProps):
    company_name: str = "Company Name"
    address: str = "123 Street, City, Country"
    show_unsubscribe: bool = True
    unsubscribe_text: str = "Unsubscribe"
    background_color: str = "#f4f4f4"
    text_color: str = "#666666"


@dataclass
class EmailHeader:
    props: HeaderProps = field(default_factory=HeaderProps)
    type: ClassVar[BlockType] = BlockType.HEADER


@dataclass
class EmailText:
    props: TextProps = field(default_factory=TextProps)
    type: ClassVar[BlockType] = BlockType.TEXT


@dataclass
class EmailImage:
    props: ImageProps = field(default_factory=ImageProps)
    type: ClassVar[BlockType] = BlockType.IMAGE


@dataclass
class EmailButton:
    props: ButtonProps = field(default_factory=ButtonProps)
    type: ClassVar[BlockType] = BlockType.BUTTON


@dataclass
class EmailColumns:
    props: ColumnsProps = field(default_factory=ColumnsProps)
    children: list["Block"] = field(default_factory=list)
    type: ClassVar[BlockType] = BlockType.COLUMNS


@dataclass
class EmailSpacer:
    props: SpacerProps = field(default_factory=SpacerProps)
    type: ClassVar[BlockType] = BlockType.SPACER


@dataclass
class EmailDivider:
    props: DividerProps = field(default_factory=DividerProps)
    type: ClassVar[BlockType] = BlockType.DIVIDER


@dataclass
class EmailSocial:
    props: SocialProps = field(default_factory=SocialProps)
    type: ClassVar[BlockType] = BlockType.SOCIAL


@dataclass
class EmailFooter:
    props: FooterProps = field(default_factory=FooterProps)
    type: ClassVar[BlockType] = BlockType.FOOTER


Block = Union[
    EmailHeader,
    EmailText,
    EmailImage,
    EmailButton,
    EmailColumns,
    EmailSpacer,
    EmailDivider,
    EmailSocial,
    EmailFooter,
]

# (block class, props class) per variant
BLOCK_CLASSES: dict[BlockType, tuple[type, type[BlockProps]]] = {
    BlockType.HEADER: (EmailHeader, HeaderProps),
    BlockType.TEXT: (EmailText, TextProps),
    BlockType.IMAGE: (EmailImage, ImageProps),
    BlockType.BUTTON: (EmailButton, ButtonProps),
    BlockType.COLUMNS: (EmailColumns, ColumnsProps),
    BlockType.SPACER: (EmailSpacer, SpacerProps),
    BlockType.DIVIDER: (EmailDivider, DividerProps),
    BlockType.SOCIAL: (EmailSocial, SocialProps),
    BlockType.FOOTER: (EmailFooter, FooterProps),
}


def block_from_dict(data: dict[str, Any]) -> Block:
    """Build a block from validated JSON.

    Raises:
        ValueError: If the block type is not one of the known variants.
    """
    block_type = BlockType(data["type"])
    block_cls, props_cls = BLOCK_CLASSES[block_type]
    props = props_cls.from_dict(data.get("props") or {})
    if block_type is BlockType.COLUMNS:
        children = [block_from_dict(child) for child in data.get("children") or []]
        return block_cls(props=props, children=children)
    return block_cls(props=props)


def block_to_dict(block: Block) -> dict[str, Any]:
    """Serialize a block to its persisted JSON shape."""
    data: dict[str, Any] = {"type": block.type.value, "props": block.props.to_dict()}
    if isinstance(block, EmailColumns):
        data["children"] = [block_to_dict(child) for child in block.children]
    return data
