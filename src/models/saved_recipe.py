"""Saved recipe model for generated recipes the owner chose to keep."""

from sqlalchemy import JSON, Column, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from src.database import Base
from src.models.mixins import TimestampMixin


class SavedRecipe(Base, TimestampMixin):
    """A generated recipe kept by its owner, stored as the recipe payload."""

    __tablename__ = "saved_recipes"

    id = Column(String(64), primary_key=True)  # Client-chosen, or uuid hex when omitted
    owner_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    recipe = Column(JSON, nullable=False)  # {title, description, prep_time, ..., nutrition}

    # Relationships
    owner = relationship("User", backref="saved_recipes")
