"""Enums for model fields."""

from enum import Enum


class ItemStatus(str, Enum):
    """Freshness tier of an inventory item, derived from its days to expiry."""

    GOOD = "good"
    WARNING = "warning"
    BAD = "bad"


class SortMode(str, Enum):
    """Orderings offered by the inventory screen."""

    NAME = "name"
    EXPIRY = "expiry"
    RECENT = "recent"


class IngredientSource(str, Enum):
    """Where a selected recipe ingredient came from."""

    INVENTORY = "inventory"
    CUSTOM = "custom"
