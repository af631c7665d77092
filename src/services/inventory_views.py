"""Derived views over a snapshot of an owner's inventory.

Every function here is pure: it takes the items read for the current request
(after that request's decay pass) and returns a new list or mapping. Nothing
is cached, so views can never disagree with the store.
"""

from collections import Counter
from collections.abc import Iterable, Sequence
from datetime import datetime
from typing import Protocol

from src.models.enums import ItemStatus, SortMode
from src.models.mixins import as_utc
from src.services.classification import UNCATEGORIZED, display_category

DASHBOARD_EXPIRING_THRESHOLD = 5
ALERT_EXPIRING_THRESHOLD = 3


class ItemLike(Protocol):
    """Read-only shape the views need; satisfied by models and response schemas."""

    name: str
    category: str | None
    expiry_days: int | None
    status: str | None
    created_at: datetime
    updated_at: datetime


def _name_key(item: ItemLike) -> str:
    return item.name.lower()


def expiring_soon(
    items: Iterable[ItemLike],
    threshold: int = DASHBOARD_EXPIRING_THRESHOLD,
) -> list[ItemLike]:
    """Items expiring within threshold days, soonest first, then by name."""
    expiring = [
        item for item in items if item.expiry_days is not None and item.expiry_days <= threshold
    ]
    return sorted(expiring, key=lambda item: (item.expiry_days, _name_key(item)))


def category_histogram(items: Iterable[ItemLike]) -> dict[str, int]:
    """Item count per stored category; missing or blank categories count as uncategorized."""
    counts: Counter[str] = Counter()
    for item in items:
        category = (item.category or "").strip()
        counts[category or UNCATEGORIZED] += 1
    return dict(counts)


def recent_items(items: Iterable[ItemLike], limit: int) -> list[ItemLike]:
    """Most recently created items first."""
    if limit <= 0:
        return []
    ordered = sorted(items, key=lambda item: as_utc(item.created_at), reverse=True)
    return ordered[:limit]


def filter_by_name(items: Iterable[ItemLike], query: str | None) -> list[ItemLike]:
    """Case-insensitive substring match on name; an empty query keeps everything."""
    needle = (query or "").strip().lower()
    if not needle:
        return list(items)
    return [item for item in items if needle in item.name.lower()]


def filter_by_category(items: Iterable[ItemLike], category: str | None) -> list[ItemLike]:
    """Items in one category; None or "all" keeps everything."""
    wanted = (category or "all").strip().lower()
    if wanted == "all":
        return list(items)
    return [item for item in items if (item.category or "").strip().lower() == wanted]


def sort_items(items: Iterable[ItemLike], mode: SortMode | str = SortMode.NAME) -> list[ItemLike]:
    """Order items for display.

    name: A-Z. expiry: soonest first, perpetual items last. recent: most
    recently updated first.
    """
    mode = SortMode(mode)
    if mode == SortMode.EXPIRY:
        return sorted(
            items,
            key=lambda item: (item.expiry_days is None, item.expiry_days or 0, _name_key(item)),
        )
    if mode == SortMode.RECENT:
        return sorted(items, key=lambda item: as_utc(item.updated_at), reverse=True)
    return sorted(items, key=_name_key)


def group_by_category(items: Iterable[ItemLike]) -> list[tuple[str, list[ItemLike]]]:
    """Sections keyed by display category, in order of first appearance.

    Item order within a section is preserved, so sort before grouping.
    """
    sections: dict[str, list[ItemLike]] = {}
    for item in items:
        sections.setdefault(display_category(item.category), []).append(item)
    return list(sections.items())


def inventory_stats(
    items: Sequence[ItemLike],
    expiring_threshold: int = DASHBOARD_EXPIRING_THRESHOLD,
) -> dict[str, int]:
    """Headline numbers for the dashboard."""
    return {
        "total_items": len(items),
        "categories": len(category_histogram(items)),
        "expiring_soon": len(expiring_soon(items, expiring_threshold)),
        "good_items": sum(1 for item in items if item.status == ItemStatus.GOOD.value),
    }
