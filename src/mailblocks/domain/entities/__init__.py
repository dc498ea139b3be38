"""Domain entities for MailBlocks.

Entities are pure Python dataclasses that represent the email document model.
They have no dependencies on infrastructure or external frameworks.
"""

from mailblocks.domain.entities.blocks import (
    BLOCK_TYPE_NAMES,
    Block,
    BlockType,
    ButtonProps,
    ColumnsProps,
    DividerProps,
    EmailButton,
    EmailColumns,
    EmailDivider,
    EmailFooter,
    EmailHeader,
    EmailImage,
    EmailSocial,
    EmailSpacer,
    EmailText,
    FooterProps,
    HeaderProps,
    ImageProps,
    SocialNetwork,
    SocialProps,
    SpacerProps,
    TextProps,
    block_from_dict,
    block_to_dict,
)
from mailblocks.domain.entities.email_template import (
    TEMPLATE_VERSION,
    EmailTemplate,
    TemplateMetadata,
    TemplateSettings,
)

__all__ = [
    "BLOCK_TYPE_NAMES",
    "Block",
    "BlockType",
    "ButtonProps",
    "ColumnsProps",
    "DividerProps",
    "EmailButton",
    "EmailColumns",
    "EmailDivider",
    "EmailFooter",
    "EmailHeader",
    "EmailImage",
    "EmailSocial",
    "EmailSpacer",
    "EmailTemplate",
    "EmailText",
    "FooterProps",
    "HeaderProps",
    "ImageProps",
    "SocialNetwork",
    "SocialProps",
    "SpacerProps",
    "TEMPLATE_VERSION",
    "TemplateMetadata",
    "TemplateSettings",
    "TextProps",
    "block_from_dict",
    "block_to_dict",
]
