"""Inventory item model for perishable goods tracked per owner."""

import uuid

from sqlalchemy import CheckConstraint, Column, Float, ForeignKey, Index, Integer, String
from sqlalchemy.orm import relationship

from src.database import Base
from src.models.mixins import TimestampMixin


def new_item_id() -> str:
    """Opaque identifier assigned to items at creation."""
    return uuid.uuid4().hex


class InventoryItem(Base, TimestampMixin):
    """An item the owner has at home, with its remaining days to expiry."""

    __tablename__ = "inventory_items"
    __table_args__ = (
        Index("ix_inventory_items_owner_expiry", "owner_id", "expiry_days"),
        CheckConstraint("expiry_days IS NULL OR expiry_days >= 0", name="ck_expiry_days_nonneg"),
        CheckConstraint("quantity >= 0", name="ck_quantity_nonneg"),
    )

    id = Column(String(32), primary_key=True, default=new_item_id)
    owner_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    quantity = Column(Float, nullable=False, default=0)
    unit = Column(String(50), nullable=False, default="pcs")
    category = Column(String(100), nullable=True)  # Open set: "dairy", "bakery", ...
    expiry_days = Column(Integer, nullable=True)  # NULL = does not expire
    status = Column(String(20), nullable=True)  # "good" | "warning" | "bad", NULL if perpetual

    # Relationships
    owner = relationship("User", backref="inventory_items")
