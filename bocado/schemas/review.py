"""Schemas for review submission and display."""

from datetime import datetime
from typing import Annotated, Optional

from pydantic import AliasChoices, BaseModel, Field, field_validator

from bocado.core.catalog import Category, PriceRange
from bocado.schemas.place import PlaceCandidate, PlaceOut

Rating = Annotated[int, Field(ge=1, le=10)]


class ReviewDraft(BaseModel):
    place: PlaceCandidate
    dish_name: Optional[str] = None

    food_taste: Rating
    presentation: Rating
    portion_size: Rating
    music_acoustics: Rating
    ambiance: Rating
    furniture_comfort: Rating
    service: Rating
    drinks_variety: Optional[int] = Field(None, ge=1, le=10)
    cleanliness: Optional[int] = Field(None, ge=1, le=10)

    celiac_friendly: bool = False
    vegetarian_friendly: bool = False
    price_range: PriceRange
    category: Category = Field(..., validation_alias=AliasChoices("category", "restaurant_category"))
    comment: Optional[str] = None
    photo_urls: list[str] = Field(default_factory=list, max_length=6)

    @field_validator("dish_name", "comment")
    @classmethod
    def _blank_to_none(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        value = value.strip()
        return value or None

    @field_validator("photo_urls")
    @classmethod
    def _drop_empty_urls(cls, value: list[str]) -> list[str]:
        return [url for url in value if url]


class PointsBreakdownOut(BaseModel):
    base_points: int
    first_review_bonus: int
    photo_bonus: int
    extended_review_bonus: int
    total_points: int

    model_config = {"from_attributes": True}


class UnlockedAchievement(BaseModel):
    achievement_id: str
    category: str
    level: int
    name: str
    description: Optional[str] = None
    icon: Optional[str] = None
    color: Optional[str] = None
    required_reviews: int
    points_reward: int


class ReviewUser(BaseModel):
    id: str
    full_name: Optional[str] = None
    avatar_url: Optional[str] = None

    model_config = {"from_attributes": True}


class ReviewOut(BaseModel):
    id: str
    user_id: str
    place_id: str
    dish_name: Optional[str] = None
    food_taste: int
    presentation: int
    portion_size: int
    music_acoustics: int
    ambiance: int
    furniture_comfort: int
    service: int
    drinks_variety: Optional[int] = None
    cleanliness: Optional[int] = None
    celiac_friendly: bool = False
    vegetarian_friendly: bool = False
    price_range: str
    category: str
    comment: Optional[str] = None
    photo_urls: list[str] = Field(default_factory=list)
    primary_photo_url: Optional[str] = None
    overall_rating: float
    created_at: datetime
    user: Optional[ReviewUser] = None
    place: Optional[PlaceOut] = None

    model_config = {"from_attributes": True}


class SubmissionResponse(BaseModel):
    review_id: str
    place_id: str
    points: PointsBreakdownOut
    achievements: list[UnlockedAchievement] = Field(default_factory=list)
    message: str


class DishRecommendation(BaseModel):
    review_id: str
    dish_name: str
    photo_url: str
    place: PlaceOut
    user: ReviewUser
