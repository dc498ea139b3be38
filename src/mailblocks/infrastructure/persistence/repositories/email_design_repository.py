"""Repository for saved email designs."""

import json
from datetime import datetime, timezone
from typing import Any, Sequence

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from mailblocks.infrastructure.persistence.models.email_design import EmailDesignModel


def dump_template(template: dict[str, Any]) -> str:
    return json.dumps(template, ensure_ascii=False, separators=(",", ":"))


class EmailDesignRepository:
    """Repository for email design database operations."""

    def __init__(self, session: AsyncSession):
        """Initialize the repository.

        Args:
            session: SQLAlchemy async session.
        """
        self.session = session

    async def create(
        self,
        name: str,
        template: dict[str, Any],
        mjml: str,
        html: str = "",
    ) -> EmailDesignModel:
        """Create a new design from a published template.

        Args:
            name: Display name.
            template: Template in its persisted JSON shape.
            mjml: Compiled MJML.
            html: Rendered HTML.

        Returns:
            The created EmailDesignModel.
        """
        design = EmailDesignModel(
            name=name,
            template_json=dump_template(template),
            mjml=mjml,
            html=html,
        )
        self.session.add(design)
        await self.session.commit()
        await self.session.refresh(design)
        return design

    async def get_by_id(self, design_id: str) -> EmailDesignModel | None:
        result = await self.session.execute(
            select(EmailDesignModel).where(EmailDesignModel.id == design_id)
        )
        return result.scalar_one_or_none()

    async def list_all(self, skip: int = 0, limit: int = 100) -> Sequence[EmailDesignModel]:
        """List designs, most recently published first."""
        stmt = (
            select(EmailDesignModel)
            .order_by(EmailDesignModel.updated_at.desc(), EmailDesignModel.name)
            .offset(skip)
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return result.scalars().all()

    async def update_published(
        self,
        design_id: str,
        template: dict[str, Any],
        mjml: str,
        html: str = "",
        name: str | None = None,
    ) -> EmailDesignModel | None:
        """Replace the published version of a design.

        Publishing discards any pending draft.

        Returns:
            The updated EmailDesignModel or None if not found.
        """
        design = await self.get_by_id(design_id)
        if design is None:
            return None

        if name is not None:
            design.name = name
        design.template_json = dump_template(template)
        design.mjml = mjml
        design.html = html
        design.draft_json = None
        design.draft_saved_at = None
        design.updated_at = datetime.now(timezone.utc)

        await self.session.commit()
        await self.session.refresh(design)
        return design

    async def save_draft(
        self, design_id: str, template: dict[str, Any]
    ) -> EmailDesignModel | None:
        """Store an autosaved draft without touching the published version.

        Returns:
            The updated EmailDesignModel or None if not found.
        """
        design = await self.get_by_id(design_id)
        if design is None:
            return None

        design.draft_json = dump_template(template)
        design.draft_saved_at = datetime.now(timezone.utc)

        await self.session.commit()
        await self.session.refresh(design)
        return design

    async def delete(self, design_id: str) -> bool:
        """Delete a design.

        Returns:
            True if a design was deleted, False if it did not exist.
        """
        result = await self.session.execute(
            delete(EmailDesignModel).where(EmailDesignModel.id == design_id)
        )
        await self.session.commit()
        return result.rowcount > 0
