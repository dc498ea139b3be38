"""SQLAlchemy model for the email_designs table.

A design stores the three representations of one email side by side: the
template JSON the editor loads, the compiled MJML and the rendered HTML.
Autosaved drafts live next to the published version until the next save.
"""

import uuid
from datetime import datetime

from sqlalchemy import DateTime, Index, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from mailblocks.infrastructure.persistence.database import Base


class EmailDesignModel(Base):
    """SQLAlchemy model for the email_designs table.

    Attributes:
        id: Primary key (UUID string).
        name: Display name of the design.
        template_json: Published template, serialized as JSON.
        mjml: MJML compiled from ``template_json``.
        html: HTML rendered from ``mjml``; empty when rendering is disabled
            or the engine failed.
        draft_json: Latest autosaved template JSON, if newer than the
            published version.
        draft_saved_at: When the draft was last autosaved.
        created_at: Timestamp when the design was created.
        updated_at: Timestamp when the design was last published.
    """

    __tablename__ = "email_designs"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid.uuid4()),
        comment="Email design ID (UUID)",
    )
    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Display name of the design",
    )
    template_json: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        comment="Published template JSON",
    )
    mjml: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        comment="MJML compiled from the template",
    )
    html: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        default="",
        comment="HTML rendered from the MJML",
    )
    draft_json: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
        comment="Autosaved draft template JSON",
    )
    draft_saved_at: Mapped[datetime | None] = mapped_column(
        DateTime,
        nullable=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        nullable=False,
        server_default=func.now(),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        nullable=False,
        server_default=func.now(),
        comment="Set when the design is published; draft autosaves leave it alone",
    )

    __table_args__ = (Index("ix_email_designs_updated_at", "updated_at"),)

    def __repr__(self) -> str:
        return f"<EmailDesign(id={self.id}, name={self.name})>"
