"""Expiry decay: ages every item's days-to-expiry as calendar days pass.

The decay anchor is each item's own ``updated_at``. A pass that applies decay
advances ``updated_at`` to ``now`` in the same write, so a second pass on the
same day finds nothing to do. No separate "last run" cursor is kept, which
makes it safe to trigger a pass from any entry point (app foreground, manual
refresh, scheduled job) without coordination.

Elapsed days are counted between calendar dates in a fixed timezone (UTC
unless ``DECAY_TIMEZONE`` says otherwise), not as fractional 24-hour periods.
Counting whole dates means re-anchoring to ``now`` never discards part of a
day, however irregularly the pass runs.
"""

import logging
from dataclasses import dataclass, field
from datetime import UTC, date, datetime, tzinfo
from typing import TYPE_CHECKING

from src.config import get_settings
from src.exceptions import ItemValidationError, PartialDecayFailure
from src.models.enums import ItemStatus
from src.models.mixins import as_utc, utcnow
from src.services.classification import classify

if TYPE_CHECKING:
    from src.services.inventory_store import InventoryStore

logger = logging.getLogger(__name__)

EXPIRY_DATE_FORMAT = "%d-%m-%Y"


def elapsed_days(now: datetime, updated_at: datetime, tz: tzinfo = UTC) -> int:
    """Whole calendar days from updated_at to now; never negative (clock skew)."""
    start = as_utc(updated_at).astimezone(tz).date()
    end = as_utc(now).astimezone(tz).date()
    return max(0, (end - start).days)


def decay(
    now: datetime,
    updated_at: datetime,
    expiry_days: int | None,
    tz: tzinfo = UTC,
) -> tuple[int | None, ItemStatus | None]:
    """Compute an item's days-to-expiry and status as of now.

    Perpetual items (expiry_days None) are returned unchanged. Days never
    drop below zero and never grow.
    """
    if expiry_days is None:
        return None, None
    days = elapsed_days(now, updated_at, tz)
    new_expiry_days = max(0, expiry_days - days) if days >= 1 else expiry_days
    return new_expiry_days, classify(new_expiry_days)


def days_until(expiry_date: str | date, today: date) -> int:
    """Days from today until a printed expiry date (DD-MM-YYYY), floored at 0."""
    if isinstance(expiry_date, str):
        try:
            expiry_date = datetime.strptime(expiry_date.strip(), EXPIRY_DATE_FORMAT).date()
        except ValueError:
            raise ItemValidationError(
                f"Expiry date must be in DD-MM-YYYY format, got '{expiry_date}'"
            ) from None
    return max(0, (expiry_date - today).days)


@dataclass
class DecayResult:
    """Outcome of one decay pass over an owner's inventory."""

    mutated: int = 0
    failed_ids: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failed_ids

    def raise_for_failures(self) -> None:
        """Raise PartialDecayFailure if any item could not be written."""
        if self.failed_ids:
            raise PartialDecayFailure(self.mutated, list(self.failed_ids))


class ExpiryDecayEngine:
    """Applies decay to every item an owner has, one self-contained write per item."""

    def __init__(self, store: "InventoryStore", tz: tzinfo | None = None):
        self.store = store
        self.tz = tz or get_settings().decay_tzinfo

    def apply_decay(self, owner_id: int, now: datetime | None = None) -> DecayResult:
        """Decay all of the owner's items as of now.

        Raises StoreUnavailable if the items cannot be fetched. Per-item write
        failures are collected in the result; those items keep their old
        updated_at and are picked up again by the next pass.
        """
        now = as_utc(now) if now else utcnow()
        items = self.store.list_items(owner_id)

        # Copy what was observed before writing; the write is conditional on it
        observed = [
            (item.id, item.expiry_days, item.updated_at)
            for item in items
            if item.expiry_days is not None
        ]

        result = DecayResult()
        for item_id, expiry_days, updated_at in observed:
            try:
                if elapsed_days(now, updated_at, self.tz) < 1:
                    continue
                new_expiry_days, new_status = decay(now, updated_at, expiry_days, self.tz)
                written = self.store.write_decay(
                    item_id,
                    expiry_days=new_expiry_days,
                    status=new_status,
                    observed_updated_at=updated_at,
                    now=now,
                )
            except Exception as e:
                logger.warning(f"Decay failed for item {item_id} (owner {owner_id}): {e}")
                result.failed_ids.append(item_id)
                continue

            if written:
                result.mutated += 1
            else:
                # Another pass (or a user edit) got there first
                logger.debug(f"Item {item_id} changed since it was read; decay skipped")

        if result.mutated or result.failed_ids:
            logger.info(
                f"Decay pass for owner {owner_id}: {result.mutated} updated, "
                f"{len(result.failed_ids)} failed"
            )
        return result
