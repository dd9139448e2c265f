"""Notifications: storage, read state and real-time fan-out."""

from __future__ import annotations

import asyncio
import threading
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

import structlog
from sqlalchemy import event, func, select, update
from sqlalchemy.orm import Session

from bocado.models._common import new_id, utcnow
from bocado.models.notification import NOTIFICATION_TYPES, Notification
from bocado.schemas.notification import NotificationOut

logger = structlog.get_logger(__name__)

_PENDING_KEY = "pending_notifications"


def time_ago(created_at: datetime, now: datetime | None = None) -> str:
    now = now or utcnow()
    seconds = int((now - created_at).total_seconds())
    if seconds < 60:
        return "Ahora"
    minutes = seconds // 60
    if minutes < 60:
        return f"Hace {minutes} min"
    hours = minutes // 60
    if hours < 24:
        return f"Hace {hours} h"
    days = hours // 24
    return f"Hace {days} d"


def to_out(notification: Notification, now: datetime | None = None) -> NotificationOut:
    out = NotificationOut.model_validate(notification)
    out.time_ago = time_ago(notification.created_at, now)
    return out


def create_notification(
    db: Session,
    user_id: str,
    type: str,
    title: str,
    message: str,
    data: dict[str, Any] | None = None,
) -> Notification:
    """Add a notification to the session; it is pushed to subscribers after commit."""
    if type not in NOTIFICATION_TYPES:
        raise ValueError(f"Unknown notification type: {type}")
    notification = Notification(
        id=new_id(),
        user_id=user_id,
        type=type,
        title=title,
        message=message,
        data=data or {},
        is_read=False,
        created_at=utcnow(),
    )
    db.add(notification)
    db.info.setdefault(_PENDING_KEY, []).append(
        (user_id, to_out(notification).model_dump(mode="json"))
    )
    return notification


@event.listens_for(Session, "after_commit")
def _publish_pending(session: Session) -> None:
    for user_id, payload in session.info.pop(_PENDING_KEY, []):
        notification_broker.publish(user_id, payload)


@event.listens_for(Session, "after_soft_rollback")
def _drop_pending(session: Session, previous_transaction) -> None:
    # a savepoint rollback leaves the outer transaction's notifications pending
    if not previous_transaction.nested:
        session.info.pop(_PENDING_KEY, None)


def get_user_notifications(db: Session, user_id: str, limit: int = 20, offset: int = 0) -> list[NotificationOut]:
    rows = (
        db.execute(
            select(Notification)
            .where(Notification.user_id == user_id)
            .order_by(Notification.created_at.desc(), Notification.id)
            .limit(limit)
            .offset(offset)
        )
        .scalars()
        .all()
    )
    now = utcnow()
    return [to_out(n, now) for n in rows]


def get_unread_notifications_count(db: Session, user_id: str) -> int:
    return db.execute(
        select(func.count(Notification.id)).where(
            Notification.user_id == user_id,
            Notification.is_read.is_(False),
        )
    ).scalar_one()


def mark_notification_as_read(db: Session, notification_id: str, user_id: str) -> bool:
    """Mark one of the user's notifications read; False if it is not theirs or missing."""
    result = db.execute(
        update(Notification)
        .where(Notification.id == notification_id, Notification.user_id == user_id)
        .values(is_read=True)
    )
    db.commit()
    return result.rowcount == 1


def mark_all_notifications_as_read(db: Session, user_id: str) -> int:
    result = db.execute(
        update(Notification)
        .where(Notification.user_id == user_id, Notification.is_read.is_(False))
        .values(is_read=True)
    )
    db.commit()
    return result.rowcount


# =============================================================================
# Real-time delivery
# =============================================================================


@dataclass
class Subscription:
    user_id: str
    queue: asyncio.Queue
    loop: asyncio.AbstractEventLoop


class NotificationBroker:
    """In-process publish/subscribe keyed by user id.

    Publishing is safe from worker threads (sync endpoints); delivery happens
    on the subscriber's event loop.
    """

    def __init__(self) -> None:
        self._subscriptions: dict[str, list[Subscription]] = {}
        self._lock = threading.Lock()

    def subscribe(self, user_id: str) -> Subscription:
        subscription = Subscription(user_id, asyncio.Queue(), asyncio.get_running_loop())
        with self._lock:
            self._subscriptions.setdefault(user_id, []).append(subscription)
        return subscription

    def unsubscribe(self, subscription: Subscription) -> None:
        with self._lock:
            subs = self._subscriptions.get(subscription.user_id, [])
            if subscription in subs:
                subs.remove(subscription)
            if not subs:
                self._subscriptions.pop(subscription.user_id, None)

    def subscriber_count(self, user_id: str) -> int:
        with self._lock:
            return len(self._subscriptions.get(user_id, []))

    def publish(self, user_id: str, payload: dict[str, Any]) -> int:
        with self._lock:
            subs = list(self._subscriptions.get(user_id, []))
        delivered = 0
        for sub in subs:
            try:
                sub.loop.call_soon_threadsafe(sub.queue.put_nowait, payload)
                delivered += 1
            except RuntimeError:
                # loop already closed; the websocket is gone
                self.unsubscribe(sub)
        return delivered


notification_broker = NotificationBroker()


@dataclass
class NotificationFeed:
    """Consumer-side view of a notification stream.

    Events may arrive late, out of order or more than once; they are applied
    by id and kept newest first.
    """

    items: dict[str, dict[str, Any]] = field(default_factory=dict)

    def apply(self, payload: dict[str, Any]) -> bool:
        """Apply one event; returns False for an already-seen id."""
        notification_id = payload.get("id")
        if not notification_id or notification_id in self.items:
            return False
        self.items[notification_id] = payload
        return True

    def mark_read(self, notification_id: str) -> None:
        if notification_id in self.items:
            self.items[notification_id] = {**self.items[notification_id], "is_read": True}

    @property
    def ordered(self) -> list[dict[str, Any]]:
        return sorted(
            self.items.values(),
            key=lambda item: (str(item.get("created_at", "")), item["id"]),
            reverse=True,
        )

    @property
    def unread_count(self) -> int:
        return sum(1 for item in self.items.values() if not item.get("is_read"))
