"""Notification endpoints and the real-time websocket."""

import asyncio

import structlog
from fastapi import APIRouter, Depends, Query, WebSocket, WebSocketDisconnect, status
from fastapi.concurrency import run_in_threadpool
from sqlalchemy.orm import Session

from bocado.api.deps import get_current_user
from bocado.core.exceptions import NotFound
from bocado.db.session import get_db
from bocado.models.user import User
from bocado.schemas.notification import NotificationOut, UnreadCount
from bocado.services.auth import verify_token
from bocado.services.notifications import (
    NotificationFeed,
    Subscription,
    get_unread_notifications_count,
    get_user_notifications,
    mark_all_notifications_as_read,
    mark_notification_as_read,
    notification_broker,
)

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("", response_model=list[NotificationOut])
def list_notifications(
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
) -> list[NotificationOut]:
    return get_user_notifications(db, user.id, limit, offset)


@router.get("/unread-count", response_model=UnreadCount)
def unread_count(db: Session = Depends(get_db), user: User = Depends(get_current_user)) -> UnreadCount:
    return UnreadCount(unread=get_unread_notifications_count(db, user.id))


@router.post("/read-all")
def read_all(db: Session = Depends(get_db), user: User = Depends(get_current_user)) -> dict[str, int]:
    return {"updated": mark_all_notifications_as_read(db, user.id)}


@router.post("/{notification_id}/read")
def read_one(
    notification_id: str,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
) -> dict[str, bool]:
    if not mark_notification_as_read(db, notification_id, user.id):
        raise NotFound("Notification not found", {"notification_id": notification_id})
    return {"success": True}


@router.websocket("/ws")
async def notifications_ws(
    websocket: WebSocket,
    token: str = Query(...),
    db: Session = Depends(get_db),
) -> None:
    """Push the user's notifications as they are committed.

    The latest notifications are sent first as a snapshot; ids already sent
    are never sent twice on the same connection.
    """
    identity = await run_in_threadpool(verify_token, token)
    if identity is None:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    await websocket.accept()
    subscription = notification_broker.subscribe(identity.id)
    feed = NotificationFeed()
    log = logger.bind(user_id=identity.id)
    log.info("notifications_ws_connected")
    try:
        snapshot = await run_in_threadpool(get_user_notifications, db, identity.id)
        for item in reversed(snapshot):
            await _send(websocket, feed, item.model_dump(mode="json"))

        forward = asyncio.create_task(_forward(websocket, feed, subscription))
        drain = asyncio.create_task(_wait_for_disconnect(websocket))
        done, pending = await asyncio.wait({forward, drain}, return_when=asyncio.FIRST_COMPLETED)
        for task in pending:
            task.cancel()
        for task in done:
            task.result()
    except WebSocketDisconnect:
        pass
    finally:
        notification_broker.unsubscribe(subscription)
        log.info("notifications_ws_disconnected")


async def _send(websocket: WebSocket, feed: NotificationFeed, payload: dict) -> None:
    if feed.apply(payload):
        await websocket.send_json({"event": "notification", "notification": payload})


async def _forward(websocket: WebSocket, feed: NotificationFeed, subscription: Subscription) -> None:
    while True:
        await _send(websocket, feed, await subscription.queue.get())


async def _wait_for_disconnect(websocket: WebSocket) -> None:
    # client messages carry nothing; only the disconnect matters
    while True:
        message = await websocket.receive()
        if message["type"] == "websocket.disconnect":
            return
