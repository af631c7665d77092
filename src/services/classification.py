"""Status tier policy for inventory items."""

from src.models.enums import ItemStatus

# Upper bounds (inclusive) of each tier, in days to expiry
BAD_MAX_DAYS = 2
WARNING_MAX_DAYS = 5

KNOWN_CATEGORIES = (
    "dairy",
    "bakery",
    "snacks",
    "fruits",
    "vegetables",
    "poultry",
    "meat",
    "seafood",
    "grains",
    "beverages",
    "condiments",
    "personal care",
)
UNCATEGORIZED = "uncategorized"


def classify(expiry_days: int | None) -> ItemStatus | None:
    """Map remaining days to a status tier.

    Items without an expiry (None) have no tier and are never alerted on.
    """
    if expiry_days is None:
        return None
    if expiry_days <= BAD_MAX_DAYS:
        return ItemStatus.BAD
    if expiry_days <= WARNING_MAX_DAYS:
        return ItemStatus.WARNING
    return ItemStatus.GOOD


def status_value(expiry_days: int | None) -> str | None:
    """Classification as the string stored in the status column."""
    status = classify(expiry_days)
    return status.value if status else None


def display_category(category: str | None) -> str:
    """Category used when grouping items on screen."""
    normalized = (category or "").strip().lower()
    if normalized in KNOWN_CATEGORIES:
        return normalized
    return UNCATEGORIZED
