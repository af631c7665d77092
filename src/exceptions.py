"""Domain errors raised by the inventory services."""


class InventoryError(Exception):
    """Base class for inventory domain errors."""


class StoreUnavailable(InventoryError):
    """The item store could not be reached."""


class ItemNotFound(InventoryError):
    """An update, read or delete referenced an item the owner does not have."""

    def __init__(self, item_id: str):
        super().__init__(f"Inventory item {item_id} not found")
        self.item_id = item_id


class ItemValidationError(InventoryError):
    """Item or profile fields were rejected before any store write."""


class PartialDecayFailure(InventoryError):
    """Some per-item writes failed during a decay batch."""

    def __init__(self, mutated: int, failed_ids: list[str]):
        super().__init__(
            f"Decay applied to {mutated} item(s); {len(failed_ids)} item(s) failed: "
            f"{', '.join(failed_ids)}"
        )
        self.mutated = mutated
        self.failed_ids = failed_ids


class RecipeGenerationError(InventoryError):
    """The recipe generator failed or returned a malformed recipe."""
