"""Item store: the system of record for inventory items, scoped by owner."""

import logging
import math
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import date, datetime
from typing import Any

from sqlalchemy.exc import InterfaceError, OperationalError, SQLAlchemyError
from sqlalchemy.orm import Session

from src.config import get_settings
from src.exceptions import ItemNotFound, ItemValidationError, StoreUnavailable
from src.models.enums import ItemStatus
from src.models.inventory import InventoryItem
from src.models.mixins import as_utc, utcnow
from src.services.classification import status_value
from src.services.expiry import decay, days_until

logger = logging.getLogger(__name__)

DEFAULT_UNIT = "pcs"
ITEM_FIELDS = {"name", "quantity", "unit", "category", "expiry_days", "expiry_date"}


def _coerce_quantity(value: Any) -> float:
    if isinstance(value, bool):
        raise ItemValidationError("Quantity must be a number")
    try:
        quantity = float(value)
    except (TypeError, ValueError):
        raise ItemValidationError(f"Quantity must be a number, got '{value}'") from None
    if not math.isfinite(quantity) or quantity < 0:
        raise ItemValidationError("Quantity must be a non-negative number")
    return quantity


def _coerce_expiry_days(value: Any) -> int | None:
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    if isinstance(value, bool):
        raise ItemValidationError("Expiry days must be a whole number")
    if isinstance(value, float):
        if not value.is_integer():
            raise ItemValidationError("Expiry days must be a whole number")
        value = int(value)
    try:
        days = int(value)
    except (TypeError, ValueError):
        raise ItemValidationError(f"Expiry days must be a whole number, got '{value}'") from None
    if days < 0:
        raise ItemValidationError("Expiry days cannot be negative")
    return days


def _is_blank(value: Any) -> bool:
    return isinstance(value, str) and not value.strip()


def coerce_item_fields(
    fields: dict[str, Any],
    *,
    partial: bool = False,
    today: date | None = None,
) -> dict[str, Any]:
    """Validate and normalize item fields before they reach the database.

    Accepts the loosely typed payloads produced by forms and the product
    recognizer (numbers as strings, blanks for "not given"). With partial=True
    only the fields present are returned and blank strings count as absent.
    None also means "leave unchanged", except for category and expiry_days,
    where it clears the value.
    """
    unknown = set(fields) - ITEM_FIELDS
    if unknown:
        raise ItemValidationError(f"Unknown item fields: {', '.join(sorted(unknown))}")

    values: dict[str, Any] = {}

    if not partial or fields.get("name") is not None:
        name = fields.get("name")
        if not isinstance(name, str) or not name.strip():
            raise ItemValidationError("Item name is required")
        values["name"] = name.strip()

    quantity = fields.get("quantity")
    if quantity is None or _is_blank(quantity):
        if not partial:
            values["quantity"] = 0.0
    else:
        values["quantity"] = _coerce_quantity(quantity)

    unit = fields.get("unit")
    if not partial or (unit is not None and not _is_blank(unit)):
        values["unit"] = unit.strip() if isinstance(unit, str) and unit.strip() else DEFAULT_UNIT

    if not partial or "category" in fields:
        category = fields.get("category")
        values["category"] = category.strip() if isinstance(category, str) and category.strip() else None

    expiry_date = fields.get("expiry_date")
    has_expiry_date = bool(expiry_date) and not _is_blank(expiry_date)
    has_expiry_days = "expiry_days" in fields and not _is_blank(fields["expiry_days"])
    if not partial or has_expiry_days or has_expiry_date:
        expiry_days = _coerce_expiry_days(fields.get("expiry_days"))
        if expiry_days is None and has_expiry_date:
            expiry_days = days_until(expiry_date, today or utcnow().date())
        values["expiry_days"] = expiry_days

    return values


class InventoryStore:
    """Create/read/update/delete access to inventory items."""

    def __init__(self, db: Session):
        self.db = db

    @contextmanager
    def _reachable(self, action: str) -> Iterator[None]:
        """Translate connectivity failures into StoreUnavailable."""
        try:
            yield
        except (OperationalError, InterfaceError) as e:
            self.db.rollback()
            logger.error(f"Item store unavailable while trying to {action}: {e}")
            raise StoreUnavailable(f"Item store unavailable: could not {action}") from e

    def list_items(self, owner_id: int, max_expiry_days: int | None = None) -> list[InventoryItem]:
        """All of an owner's items, optionally only those with expiry_days <= max."""
        with self._reachable("list items"):
            query = self.db.query(InventoryItem).filter(InventoryItem.owner_id == owner_id)
            if max_expiry_days is not None:
                query = query.filter(
                    InventoryItem.expiry_days.isnot(None),
                    InventoryItem.expiry_days <= max_expiry_days,
                )
            return query.all()

    def get_item(self, owner_id: int, item_id: str) -> InventoryItem:
        """Get one of the owner's items, or raise ItemNotFound."""
        with self._reachable("read item"):
            item = (
                self.db.query(InventoryItem)
                .filter(InventoryItem.id == item_id, InventoryItem.owner_id == owner_id)
                .first()
            )
        if item is None:
            raise ItemNotFound(item_id)
        return item

    def create_item(
        self,
        owner_id: int,
        fields: dict[str, Any],
        now: datetime | None = None,
    ) -> InventoryItem:
        """Create an item; status is derived from expiry_days."""
        return self.create_items(owner_id, [fields], now=now)[0]

    def create_items(
        self,
        owner_id: int,
        fields_list: list[dict[str, Any]],
        now: datetime | None = None,
    ) -> list[InventoryItem]:
        """Create several items in one transaction; all are validated before any write."""
        now = as_utc(now) if now else utcnow()
        prepared = [coerce_item_fields(fields, today=now.date()) for fields in fields_list]

        items = []
        with self._reachable("create items"):
            for values in prepared:
                item = InventoryItem(
                    owner_id=owner_id,
                    status=status_value(values["expiry_days"]),
                    created_at=now,
                    updated_at=now,
                    **values,
                )
                self.db.add(item)
                items.append(item)
            self.db.commit()
            for item in items:
                self.db.refresh(item)

        logger.info(f"Created {len(items)} inventory item(s) for owner {owner_id}")
        return items

    def update_item(
        self,
        owner_id: int,
        item_id: str,
        fields: dict[str, Any],
        now: datetime | None = None,
    ) -> InventoryItem:
        """Apply a user edit.

        An edit re-anchors updated_at to now, so any decay still owed since the
        last anchor is folded in first unless the edit sets expiry_days itself.
        """
        now = as_utc(now) if now else utcnow()
        values = coerce_item_fields(fields, partial=True, today=now.date())
        item = self.get_item(owner_id, item_id)

        if "expiry_days" not in values and item.expiry_days is not None:
            owed_days, _ = decay(now, item.updated_at, item.expiry_days, get_settings().decay_tzinfo)
            values["expiry_days"] = owed_days

        for key, value in values.items():
            setattr(item, key, value)
        item.status = status_value(item.expiry_days)
        item.updated_at = now

        with self._reachable("update item"):
            self.db.commit()
            self.db.refresh(item)
        return item

    def delete_item(self, owner_id: int, item_id: str) -> None:
        """Delete one of the owner's items."""
        item = self.get_item(owner_id, item_id)
        with self._reachable("delete item"):
            self.db.delete(item)
            self.db.commit()

    def write_decay(
        self,
        item_id: str,
        *,
        expiry_days: int,
        status: ItemStatus | None,
        observed_updated_at: datetime,
        now: datetime,
    ) -> bool:
        """Persist a decay step if the item is unchanged since it was read.

        Returns False when updated_at moved on in the meantime (a concurrent
        pass or an edit already handled the item).
        """
        try:
            with self._reachable("write decay"):
                rows = (
                    self.db.query(InventoryItem)
                    .filter(
                        InventoryItem.id == item_id,
                        InventoryItem.updated_at == observed_updated_at,
                    )
                    .update(
                        {
                            InventoryItem.expiry_days: expiry_days,
                            InventoryItem.status: status.value if status else None,
                            InventoryItem.updated_at: now,
                        },
                        synchronize_session=False,
                    )
                )
                self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise
        return rows == 1

    def owner_ids_with_expiring_items(self) -> list[int]:
        """Owners that have at least one item with an expiry."""
        with self._reachable("list owners"):
            rows = (
                self.db.query(InventoryItem.owner_id)
                .filter(InventoryItem.expiry_days.isnot(None))
                .distinct()
                .all()
            )
        return [owner_id for (owner_id,) in rows]
