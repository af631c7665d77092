"""Celery tasks for inventory expiry decay and alerts."""

import logging
from datetime import UTC, datetime

from src.celery_app import app as celery_app
from src.config import get_settings
from src.database import session_scope
from src.exceptions import StoreUnavailable
from src.services.expiry import ExpiryDecayEngine
from src.services.inventory_store import InventoryStore
from src.services.inventory_views import expiring_soon
from src.services.realtime import InventoryEventType, publish_inventory_event

logger = logging.getLogger(__name__)


@celery_app.task
def refresh_owner_inventory(owner_id: int) -> dict:
    """Apply decay to one owner's inventory.

    Args:
        owner_id: ID of the owning user

    Returns:
        dict with the number of items updated and the ids that failed
    """
    try:
        with session_scope() as db:
            result = ExpiryDecayEngine(InventoryStore(db)).apply_decay(owner_id)
    except StoreUnavailable as e:
        logger.error(f"Decay for owner {owner_id} skipped: {e}")
        return {"error": str(e)}

    if result.mutated:
        publish_inventory_event(
            owner_id, InventoryEventType.ITEMS_DECAYED, {"mutated": result.mutated}
        )
    return {"owner_id": owner_id, "mutated": result.mutated, "failed_ids": result.failed_ids}


@celery_app.task
def decay_all_inventories() -> dict:
    """Apply decay to every owner that has expiring items.

    This task runs daily via celery-beat. Owners are processed one at a
    time; a failing owner does not stop the rest.

    Returns:
        dict with processing statistics
    """
    now = datetime.now(UTC)
    stats = {"owners": 0, "mutated": 0, "failed": 0, "owners_skipped": 0}

    try:
        with session_scope() as db:
            store = InventoryStore(db)
            engine = ExpiryDecayEngine(store)
            for owner_id in store.owner_ids_with_expiring_items():
                try:
                    result = engine.apply_decay(owner_id, now)
                except StoreUnavailable as e:
                    logger.error(f"Decay for owner {owner_id} skipped: {e}")
                    stats["owners_skipped"] += 1
                    continue

                stats["owners"] += 1
                stats["mutated"] += result.mutated
                stats["failed"] += len(result.failed_ids)
                if result.mutated:
                    publish_inventory_event(
                        owner_id, InventoryEventType.ITEMS_DECAYED, {"mutated": result.mutated}
                    )
    except Exception as e:
        logger.error(f"Error running scheduled decay: {e}", exc_info=True)
        return {"error": str(e), **stats}

    logger.info(f"Scheduled decay complete: {stats}")
    return stats


@celery_app.task
def check_expiring_items(owner_id: int, threshold: int | None = None) -> dict:
    """Decay an owner's inventory, then report what expires within the alert threshold.

    Args:
        owner_id: ID of the owning user
        threshold: Days to look ahead (defaults to ALERT_EXPIRING_THRESHOLD)

    Returns:
        dict with the expiring items, soonest first
    """
    if threshold is None:
        threshold = get_settings().alert_expiring_threshold

    try:
        with session_scope() as db:
            store = InventoryStore(db)
            result = ExpiryDecayEngine(store).apply_decay(owner_id)
            expiring = [
                {"id": item.id, "name": item.name, "expiry_days": item.expiry_days}
                for item in expiring_soon(store.list_items(owner_id), threshold)
            ]
    except StoreUnavailable as e:
        logger.error(f"Expiry check for owner {owner_id} skipped: {e}")
        return {"error": str(e)}

    if result.mutated:
        publish_inventory_event(
            owner_id, InventoryEventType.ITEMS_DECAYED, {"mutated": result.mutated}
        )
    if expiring:
        logger.info(f"Owner {owner_id} has {len(expiring)} item(s) expiring within {threshold} days")
    return {"owner_id": owner_id, "threshold": threshold, "items": expiring}
