"""Ingredient selection for recipe generation.

An IngredientSelection is a working set owned by one request (or one client
session): pick inventory items, adjust quantities, add free-text extras, then
hand the result to the recipe generator. It never writes to the item store;
choosing 3 eggs for a recipe does not change how many eggs are in inventory.
"""

import math
import uuid
from dataclasses import dataclass
from typing import Any

from src.exceptions import ItemValidationError
from src.models.enums import IngredientSource

CUSTOM_KEY_PREFIX = "custom:"
DEFAULT_QUANTITY = 1.0
DEFAULT_CUSTOM_UNIT = "item"


@dataclass
class SelectedIngredient:
    """One entry in the working set."""

    key: str  # inventory item id, or "custom:<uuid>"
    name: str
    quantity: float
    unit: str
    source: IngredientSource

    @property
    def is_custom(self) -> bool:
        return self.source == IngredientSource.CUSTOM

    def as_ingredient(self) -> dict[str, Any]:
        return {"name": self.name, "quantity": self.quantity, "unit": self.unit}


class IngredientSelection:
    """Insertion-ordered set of selected ingredients, keyed by identifier."""

    def __init__(self) -> None:
        # dicts keep insertion order, which is the output order
        self._entries: dict[str, SelectedIngredient] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    @property
    def entries(self) -> list[SelectedIngredient]:
        return list(self._entries.values())

    def get(self, key: str) -> SelectedIngredient | None:
        return self._entries.get(key)

    def select_item(self, item: Any, quantity: Any = DEFAULT_QUANTITY) -> SelectedIngredient:
        """Add an inventory item if it is not already selected."""
        entry = self._entries.get(item.id)
        if entry is None:
            entry = SelectedIngredient(
                key=item.id,
                name=item.name,
                quantity=DEFAULT_QUANTITY,
                unit=item.unit,
                source=IngredientSource.INVENTORY,
            )
            self._entries[item.id] = entry
        self.set_quantity(item.id, quantity)
        return entry

    def toggle_item(self, item: Any) -> bool:
        """Select the item with quantity 1, or deselect it. Returns True if now selected."""
        if item.id in self._entries:
            del self._entries[item.id]
            return False
        self.select_item(item)
        return True

    def set_quantity(self, key: str, quantity: Any) -> bool:
        """Change an entry's quantity. Non-positive or non-numeric values are ignored."""
        entry = self._entries.get(key)
        if entry is None:
            return False
        try:
            value = float(quantity)
        except (TypeError, ValueError):
            return False
        if not math.isfinite(value) or value <= 0:
            return False
        entry.quantity = value
        return True

    def add_custom(
        self,
        name: str,
        quantity: Any = DEFAULT_QUANTITY,
        unit: str | None = None,
    ) -> SelectedIngredient:
        """Add a free-text ingredient that is not in inventory."""
        cleaned = name.strip() if isinstance(name, str) else ""
        if not cleaned:
            raise ItemValidationError("Custom ingredient name is required")

        # Store ids never carry the prefix, so custom keys cannot collide with them
        key = f"{CUSTOM_KEY_PREFIX}{uuid.uuid4().hex}"
        entry = SelectedIngredient(
            key=key,
            name=cleaned,
            quantity=DEFAULT_QUANTITY,
            unit=(unit or "").strip() or DEFAULT_CUSTOM_UNIT,
            source=IngredientSource.CUSTOM,
        )
        self._entries[key] = entry
        self.set_quantity(key, quantity)
        return entry

    def remove(self, key: str) -> bool:
        """Drop an entry of either source. Returns False if it was not selected."""
        return self._entries.pop(key, None) is not None

    def clear(self) -> None:
        self._entries.clear()

    def to_ingredients(self) -> list[dict[str, Any]]:
        """Ingredient list for the recipe generator, in selection order."""
        return [entry.as_ingredient() for entry in self._entries.values()]
