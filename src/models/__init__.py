"""SQLAlchemy models."""

from src.models.inventory import InventoryItem
from src.models.saved_recipe import SavedRecipe
from src.models.user import User

__all__ = [
    "User",
    "InventoryItem",
    "SavedRecipe",
]
