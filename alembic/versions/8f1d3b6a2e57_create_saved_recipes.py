"""Create saved_recipes

Revision ID: 8f1d3b6a2e57
Revises: 5c2e9a7d41b3
Create Date: 2026-10-19 15:40:02.771904

"""

from collections.abc import Sequence

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "8f1d3b6a2e57"
down_revision: str | None = "5c2e9a7d41b3"
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "saved_recipes",
        sa.Column("id", sa.String(length=64), primary_key=True),
        sa.Column("owner_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("recipe", sa.JSON(), nullable=False),
        sa.Column(
            "created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False
        ),
        sa.Column(
            "updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False
        ),
    )
    op.create_index("ix_saved_recipes_owner_id", "saved_recipes", ["owner_id"])


def downgrade() -> None:
    op.drop_index("ix_saved_recipes_owner_id", table_name="saved_recipes")
    op.drop_table("saved_recipes")
