"""create_email_designs_table

Revision ID: 3b9e1c2a7f40
Revises:
Create Date: 2026-10-19 09:12:44.318205

"""

from collections.abc import Sequence

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "3b9e1c2a7f40"
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "email_designs",
        sa.Column("id", sa.String(length=36), nullable=False, comment="Email design ID (UUID)"),
        sa.Column(
            "name",
            sa.String(length=255),
            nullable=False,
            comment="Display name of the design",
        ),
        sa.Column(
            "template_json",
            sa.Text(),
            nullable=False,
            comment="Published template JSON",
        ),
        sa.Column(
            "mjml",
            sa.Text(),
            nullable=False,
            comment="MJML compiled from the template",
        ),
        sa.Column(
            "html",
            sa.Text(),
            nullable=False,
            server_default="",
            comment="HTML rendered from the MJML",
        ),
        sa.Column(
            "draft_json",
            sa.Text(),
            nullable=True,
            comment="Autosaved draft template JSON",
        ),
        sa.Column("draft_saved_at", sa.DateTime(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column(
            "updated_at",
            sa.DateTime(),
            nullable=False,
            server_default=sa.func.now(),
            comment="Set when the design is published; draft autosaves leave it alone",
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_email_designs_updated_at", "email_designs", ["updated_at"])


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index("ix_email_designs_updated_at", table_name="email_designs")
    op.drop_table("email_designs")
