"""User profile, level and points history schemas."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class UserLevelOut(BaseModel):
    level_number: int
    level_name: str
    level_color: str
    level_icon: str
    min_points: int
    max_points: Optional[int] = None
    progress_percentage: float
    points_to_next_level: int
    next_level_name: Optional[str] = None

    model_config = {"from_attributes": True}


class LevelOut(BaseModel):
    level_number: int
    level_name: str
    level_color: str
    level_icon: str
    min_points: int
    max_points: Optional[int] = None
    points_range: str


class UserProfile(BaseModel):
    id: str
    email: Optional[str] = None
    full_name: Optional[str] = None
    avatar_url: Optional[str] = None
    points: int
    total_reviews: int
    places_reviewed: int
    average_rating: float
    level: UserLevelOut


class PointsHistoryOut(BaseModel):
    id: str
    review_id: Optional[str] = None
    action_type: str
    points_earned: int
    description: Optional[str] = None
    created_at: datetime

    model_config = {"from_attributes": True}
