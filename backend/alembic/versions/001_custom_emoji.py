"""Custom emoji table.

Revision ID: 001_custom_emoji
Revises: None
Create Date: 2026-10-18

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "001_custom_emoji"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "custom_emoji",
        sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column("shortcode", sa.String(64), nullable=False),
        sa.Column("name", sa.String(128), nullable=False),
        sa.Column("added_by", sa.JSON(none_as_null=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index(
        "ix_custom_emoji_shortcode", "custom_emoji", ["shortcode"], unique=True,
    )


def downgrade() -> None:
    op.drop_index("ix_custom_emoji_shortcode", table_name="custom_emoji")
    op.drop_table("custom_emoji")
