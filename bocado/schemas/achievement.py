"""Achievement progress schemas."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class AchievementProgress(BaseModel):
    achievement_id: str
    category: str
    name: str
    description: Optional[str] = None
    level: int
    required_reviews: int
    points_reward: int
    icon: Optional[str] = None
    color: Optional[str] = None
    is_unlocked: bool
    current_progress: int
    progress_percentage: float
    unlocked_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class AchievementStatistics(BaseModel):
    total_achievements: int
    unlocked_achievements: int
    completion_percentage: float
    total_points_from_achievements: int
    recent: list[AchievementProgress]
