"""Schemas for LLM review enhancement."""

from typing import Optional

from pydantic import BaseModel, Field


class DietaryOptions(BaseModel):
    celiac_friendly: bool = False
    vegetarian_friendly: bool = False


class ReviewTextEnhanceRequest(BaseModel):
    original_text: str = ""
    place_name: Optional[str] = None
    dish_name: Optional[str] = None
    ratings: dict[str, int] = Field(default_factory=dict)
    price_range: Optional[str] = None
    category: Optional[str] = None
    dietary_options: Optional[DietaryOptions] = None


class ReviewEnhanceRequest(BaseModel):
    comment: str
    dish_name: Optional[str] = None
    place_name: Optional[str] = None
    category: Optional[str] = None


class EnhanceResponse(BaseModel):
    enhanced_text: str
    success: bool
