"""Notification model."""

from sqlalchemy import JSON, Boolean, Column, DateTime, ForeignKey, String, Text

from bocado.db.base import Base
from bocado.models._common import new_id, utcnow

NOTIFICATION_TYPES = ("achievement_unlocked", "review_published", "level_up", "points_earned")


class Notification(Base):
    __tablename__ = "notifications"

    id = Column(String(36), primary_key=True, default=new_id)
    user_id = Column(String(64), ForeignKey("users.id"), nullable=False, index=True)
    type = Column(String(32), nullable=False)
    title = Column(String(255), nullable=False)
    message = Column(Text, nullable=False)
    data = Column(JSON)
    is_read = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, nullable=False, default=utcnow, index=True)
