"""Notification schemas."""

from datetime import datetime
from typing import Any, Literal, Optional

from pydantic import BaseModel

NotificationType = Literal["achievement_unlocked", "review_published", "level_up", "points_earned"]


class NotificationOut(BaseModel):
    id: str
    type: NotificationType
    title: str
    message: str
    data: Optional[dict[str, Any]] = None
    is_read: bool
    created_at: datetime
    time_ago: str = ""

    model_config = {"from_attributes": True}


class UnreadCount(BaseModel):
    unread: int
