"""Points ledger."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String

from bocado.db.base import Base
from bocado.models._common import new_id, utcnow


class PointsHistory(Base):
    """One line per points award (review components, achievement rewards)."""

    __tablename__ = "points_history"

    id = Column(String(36), primary_key=True, default=new_id)
    user_id = Column(String(64), ForeignKey("users.id"), nullable=False, index=True)
    review_id = Column(String(36), ForeignKey("detailed_reviews.id", ondelete="SET NULL"))
    place_id = Column(String(36), ForeignKey("places.id"), index=True)
    action_type = Column(String(32), nullable=False)
    points_earned = Column(Integer, nullable=False)
    description = Column(String(255))
    created_at = Column(DateTime, nullable=False, default=utcnow)
