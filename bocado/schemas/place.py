"""Pydantic schemas for places."""

from datetime import datetime
from typing import Optional

from pydantic import AliasChoices, BaseModel, Field


class PlaceCandidate(BaseModel):
    """Place descriptor coming from the mapping API (or a previously selected place)."""

    id: Optional[str] = Field(None, description="Internal id; absent or temp-… when not resolved yet")
    external_id: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("external_id", "google_place_id", "place_id"),
        description="Mapping API place id",
    )
    name: Optional[str] = None
    address: Optional[str] = Field(None, validation_alias=AliasChoices("address", "formatted_address"))
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    phone: Optional[str] = Field(None, validation_alias=AliasChoices("phone", "formatted_phone_number"))
    website: Optional[str] = None


class PlaceOut(BaseModel):
    id: str
    external_id: str
    name: str
    address: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    phone: Optional[str] = None
    website: Optional[str] = None
    category: Optional[str] = None
    rating: float = 0.0
    total_reviews: int = 0
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class SelectedPlace(PlaceOut):
    """Result of selecting a place; `is_temporary` means it is not persisted yet."""

    is_temporary: bool = False


class CategorySummary(BaseModel):
    category: str
    label: str
    color: str
    place_count: int


class MapPlace(BaseModel):
    """Mapping API search result annotated with local review data."""

    external_id: str
    name: str
    address: str
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    types: list[str] = Field(default_factory=list)
    google_rating: Optional[float] = None
    local_rating: float = 0.0
    local_total_reviews: int = 0
    photo_reference: Optional[str] = None


class MapPlaceDetails(MapPlace):
    phone: Optional[str] = None
    website: Optional[str] = None
    opening_hours: list[str] = Field(default_factory=list)
    open_now: Optional[bool] = None
