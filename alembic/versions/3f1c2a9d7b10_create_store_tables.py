"""create_store_tables

Revision ID: 3f1c2a9d7b10
Revises:
Create Date: 2026-10-18 09:12:44.512093

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "3f1c2a9d7b10"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "sync_info",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("token", sa.Text(), nullable=True),
        sa.Column("locale", sa.String(length=35), nullable=True),
    )
    op.create_table(
        "entry_types",
        sa.Column("remote_id", sa.String(length=255), primary_key=True),
        sa.Column("type_id", sa.String(length=255), nullable=False),
    )
    op.create_index("ix_entry_types_type_id", "entry_types", ["type_id"])
    op.create_table(
        "links",
        sa.Column("parent", sa.String(length=255), primary_key=True),
        sa.Column("field", sa.String(length=255), primary_key=True),
        sa.Column("child", sa.String(length=255), primary_key=True),
        sa.Column("is_asset", sa.Boolean(), nullable=False),
    )
    op.create_index("idx_links_child", "links", ["child"])
    op.create_table(
        "assets",
        sa.Column("remote_id", sa.String(length=255), primary_key=True),
        sa.Column("created_at", sa.String(length=64), nullable=True),
        sa.Column("updated_at", sa.String(length=64), nullable=True),
        sa.Column("url", sa.Text(), nullable=True),
        sa.Column("mime_type", sa.String(length=255), nullable=True),
        sa.Column("title", sa.Text(), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("file", sa.LargeBinary(), nullable=True),
    )


def downgrade() -> None:
    op.drop_table("assets")
    op.drop_index("idx_links_child", table_name="links")
    op.drop_table("links")
    op.drop_index("ix_entry_types_type_id", table_name="entry_types")
    op.drop_table("entry_types")
    op.drop_table("sync_info")
