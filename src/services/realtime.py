"""Inventory change notifications over Redis pub/sub.

Each owner has one channel. Every write path (user edits, bulk adds, decay
passes) publishes after committing, so open dashboards know to re-read the
store instead of patching local copies.
"""

import json
import logging
from collections.abc import AsyncIterator
from datetime import UTC, datetime
from enum import StrEnum
from typing import TYPE_CHECKING

import redis
import redis.asyncio as aioredis

from src.config import get_settings

if TYPE_CHECKING:
    from redis.asyncio.client import PubSub

logger = logging.getLogger(__name__)
settings = get_settings()


class InventoryEventType(StrEnum):
    """Event types for inventory updates."""

    ITEM_CREATED = "item_created"
    ITEM_UPDATED = "item_updated"
    ITEM_DELETED = "item_deleted"
    ITEMS_BULK_CREATED = "items_bulk_created"
    ITEMS_DECAYED = "items_decayed"


def owner_channel(owner_id: int) -> str:
    return f"inventory:{owner_id}"


# Synchronous Redis client for use in API endpoints and tasks
_sync_redis: redis.Redis | None = None


def get_sync_redis() -> redis.Redis:
    """Get synchronous Redis client for publishing."""
    global _sync_redis
    if _sync_redis is None:
        _sync_redis = redis.from_url(settings.redis_url)
    return _sync_redis


def publish_inventory_event(
    owner_id: int,
    event_type: InventoryEventType,
    data: dict | None = None,
) -> None:
    """Publish an event to an owner's inventory channel.

    Args:
        owner_id: Owner whose inventory changed
        event_type: Type of event (item_created, items_decayed, etc.)
        data: Optional event payload
    """
    try:
        redis_client = get_sync_redis()
        channel = owner_channel(owner_id)
        message = {
            "type": event_type,
            "owner_id": owner_id,
            "timestamp": datetime.now(UTC).isoformat(),
            "data": data or {},
        }
        redis_client.publish(channel, json.dumps(message))
        logger.debug(f"Published {event_type} to {channel}")
    except Exception as e:
        # Notifications are best-effort; the store stays the source of truth
        logger.error(f"Failed to publish inventory event: {e}")


class RealtimeService:
    """Async Redis pub/sub service for WebSocket connections."""

    def __init__(self) -> None:
        self._redis: aioredis.Redis | None = None
        self._pubsub: PubSub | None = None

    async def _get_redis(self) -> aioredis.Redis:
        if self._redis is None:
            self._redis = aioredis.from_url(settings.redis_url)
        return self._redis

    async def subscribe(self, channel: str) -> AsyncIterator[dict]:
        """Subscribe to a Redis channel and yield messages."""
        redis_conn = await self._get_redis()
        self._pubsub = redis_conn.pubsub()
        await self._pubsub.subscribe(channel)

        try:
            async for message in self._pubsub.listen():
                if message["type"] == "message":
                    try:
                        yield json.loads(message["data"])
                    except json.JSONDecodeError:
                        logger.warning(f"Invalid JSON in pub/sub message: {message['data']}")
        finally:
            if self._pubsub:
                await self._pubsub.unsubscribe(channel)

    async def cleanup(self) -> None:
        """Clean up Redis connections."""
        if self._pubsub:
            await self._pubsub.close()
        if self._redis:
            await self._redis.close()
