"""WebSocket endpoint for real-time inventory updates."""

import asyncio
import logging

from fastapi import APIRouter, Query, WebSocket, WebSocketDisconnect

from src.api.dependencies import user_from_token
from src.database import SessionLocal
from src.services.realtime import RealtimeService, owner_channel

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/ws", tags=["websocket"])


@router.websocket("/inventory")
async def websocket_inventory_sync(
    websocket: WebSocket,
    token: str = Query(...),
) -> None:
    """Stream the current user's inventory change events.

    Authentication via token query parameter (WebSocket doesn't support headers).
    Clients re-read the views they show when an event arrives.
    """
    # Manual DB session for WebSocket (can't use Depends normally)
    db = SessionLocal()
    try:
        user = user_from_token(db, token)
        owner_id = user.id if user else None
    finally:
        db.close()

    if owner_id is None:
        await websocket.close(code=4001, reason="Invalid token")
        return

    realtime_service = RealtimeService()
    await websocket.accept()
    logger.info(f"WebSocket connected: owner={owner_id}")

    async def handle_messages() -> None:
        """Receive messages from Redis and forward to WebSocket."""
        async for message in realtime_service.subscribe(owner_channel(owner_id)):
            try:
                await websocket.send_json(message)
            except WebSocketDisconnect:
                break
            except Exception as e:
                logger.error(f"Error sending WebSocket message: {e}")
                break

    async def handle_ping() -> None:
        """Send periodic pings to keep connection alive."""
        while True:
            try:
                await asyncio.sleep(30)
                await websocket.send_json({"type": "ping"})
            except Exception:
                break

    async def handle_client() -> None:
        """Drain client frames (pongs, or anything else) until disconnect.

        Frames are not parsed, so a malformed or binary frame cannot end the stream.
        """
        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                break

    tasks = [
        asyncio.create_task(handle_messages()),
        asyncio.create_task(handle_ping()),
        asyncio.create_task(handle_client()),
    ]
    try:
        await asyncio.wait(tasks, return_when=asyncio.FIRST_COMPLETED)
    finally:
        for task in tasks:
            task.cancel()
        await realtime_service.cleanup()
        logger.info(f"WebSocket disconnected: owner={owner_id}")
