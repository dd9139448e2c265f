"""Detailed review model."""

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from bocado.core.catalog import LEGACY_RATING_FIELDS, RATING_FIELDS
from bocado.db.base import Base
from bocado.models._common import new_id, utcnow


class DetailedReview(Base):
    """One user's multi-dimensional review of one place."""

    __tablename__ = "detailed_reviews"
    __table_args__ = (
        UniqueConstraint("user_id", "place_id", name="uq_review_user_place"),
        CheckConstraint("food_taste BETWEEN 1 AND 10", name="ck_review_food_taste"),
        CheckConstraint("service BETWEEN 1 AND 10", name="ck_review_service"),
    )

    id = Column(String(36), primary_key=True, default=new_id)
    user_id = Column(String(64), ForeignKey("users.id"), nullable=False, index=True)
    place_id = Column(String(36), ForeignKey("places.id"), nullable=False, index=True)
    dish_name = Column(String(255))

    # 1-10
    food_taste = Column(Integer, nullable=False)
    presentation = Column(Integer, nullable=False)
    portion_size = Column(Integer, nullable=False)
    music_acoustics = Column(Integer, nullable=False)
    ambiance = Column(Integer, nullable=False)
    furniture_comfort = Column(Integer, nullable=False)
    service = Column(Integer, nullable=False)
    drinks_variety = Column(Integer)  # legacy
    cleanliness = Column(Integer)  # legacy

    celiac_friendly = Column(Boolean, nullable=False, default=False)
    vegetarian_friendly = Column(Boolean, nullable=False, default=False)
    price_range = Column(String(20), nullable=False)
    category = Column(String(50), nullable=False, index=True)
    comment = Column(Text)
    created_at = Column(DateTime, nullable=False, default=utcnow, index=True)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    user = relationship("User", back_populates="reviews")
    place = relationship("Place", back_populates="reviews")
    photos = relationship(
        "ReviewPhoto",
        back_populates="review",
        cascade="all, delete-orphan",
        order_by="ReviewPhoto.position",
    )

    @property
    def overall_rating(self) -> float:
        """Mean of every sub-rating that was filled in."""
        fields = list(RATING_FIELDS) + list(LEGACY_RATING_FIELDS)
        values = [getattr(self, f) for f in fields if getattr(self, f) is not None]
        return round(sum(values) / len(values), 2) if values else 0.0

    @property
    def photo_urls(self) -> list[str]:
        return [photo.url for photo in self.photos]

    @property
    def primary_photo_url(self) -> str | None:
        for photo in self.photos:
            if photo.is_primary:
                return photo.url
        return self.photos[0].url if self.photos else None


class ReviewPhoto(Base):
    """Blob store URL attached to a review."""

    __tablename__ = "review_photos"

    id = Column(String(36), primary_key=True, default=new_id)
    review_id = Column(
        String(36), ForeignKey("detailed_reviews.id", ondelete="CASCADE"), nullable=False, index=True
    )
    url = Column(String(1024), nullable=False)
    position = Column(Integer, nullable=False, default=0)
    is_primary = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, nullable=False, default=utcnow)

    review = relationship("DetailedReview", back_populates="photos")
