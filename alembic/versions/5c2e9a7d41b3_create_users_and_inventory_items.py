"""Create users and inventory_items

Revision ID: 5c2e9a7d41b3
Revises:
Create Date: 2026-10-19 09:12:44.318205

"""

from collections.abc import Sequence

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "5c2e9a7d41b3"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False
        ),
        sa.Column(
            "updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False
        ),
    ]


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=True),
        sa.Column("age", sa.Integer(), nullable=True),
        sa.Column("height", sa.Float(), nullable=True),
        sa.Column("weight", sa.Float(), nullable=True),
        sa.Column("health_conditions", sa.Text(), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_users_id", "users", ["id"])
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "inventory_items",
        sa.Column("id", sa.String(length=32), primary_key=True),
        sa.Column("owner_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("quantity", sa.Float(), nullable=False, server_default="0"),
        sa.Column("unit", sa.String(length=50), nullable=False, server_default="pcs"),
        sa.Column("category", sa.String(length=100), nullable=True),
        sa.Column("expiry_days", sa.Integer(), nullable=True),
        sa.Column("status", sa.String(length=20), nullable=True),
        *_timestamps(),
        sa.CheckConstraint("expiry_days IS NULL OR expiry_days >= 0", name="ck_expiry_days_nonneg"),
        sa.CheckConstraint("quantity >= 0", name="ck_quantity_nonneg"),
    )
    op.create_index("ix_inventory_items_owner_id", "inventory_items", ["owner_id"])
    op.create_index(
        "ix_inventory_items_owner_expiry", "inventory_items", ["owner_id", "expiry_days"]
    )


def downgrade() -> None:
    op.drop_index("ix_inventory_items_owner_expiry", table_name="inventory_items")
    op.drop_index("ix_inventory_items_owner_id", table_name="inventory_items")
    op.drop_table("inventory_items")
    op.drop_index("ix_users_email", table_name="users")
    op.drop_index("ix_users_id", table_name="users")
    op.drop_table("users")
