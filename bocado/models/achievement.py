"""Achievement reference data and granted records."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship

from bocado.db.base import Base
from bocado.models._common import new_id, utcnow


class Achievement(Base):
    """One rung of a category's achievement ladder."""

    __tablename__ = "category_achievements"
    __table_args__ = (UniqueConstraint("category", "level", name="uq_achievement_category_level"),)

    id = Column(String(36), primary_key=True, default=new_id)
    category = Column(String(50), nullable=False, index=True)
    level = Column(Integer, nullable=False)
    name = Column(String(255), nullable=False)
    description = Column(Text)
    icon = Column(String(16))
    color = Column(String(16))
    required_reviews = Column(Integer, nullable=False)
    points_reward = Column(Integer, nullable=False, default=0)


class UserAchievement(Base):
    """Grant record; the unique pair makes granting idempotent."""

    __tablename__ = "user_achievements"
    __table_args__ = (UniqueConstraint("user_id", "achievement_id", name="uq_user_achievement"),)

    id = Column(String(36), primary_key=True, default=new_id)
    user_id = Column(String(64), ForeignKey("users.id"), nullable=False, index=True)
    achievement_id = Column(String(36), ForeignKey("category_achievements.id"), nullable=False)
    unlocked_at = Column(DateTime, nullable=False, default=utcnow)

    achievement = relationship("Achievement")
