"""Place model."""

from sqlalchemy import Column, DateTime, Float, Integer, String, Text
from sqlalchemy.orm import relationship

from bocado.db.base import Base
from bocado.models._common import new_id, utcnow


class Place(Base):
    """Place metadata, keyed by the mapping API place id."""

    __tablename__ = "places"

    id = Column(String(36), primary_key=True, default=new_id)
    external_id = Column(String(255), nullable=False, unique=True, index=True)  # Google place_id
    name = Column(String(255), nullable=False)
    address = Column(Text)
    latitude = Column(Float)
    longitude = Column(Float)
    phone = Column(String(50))
    website = Column(String(1024))
    category = Column(String(50), index=True)  # Category, unset until the first review
    rating = Column(Float, nullable=False, default=0.0)  # mean overall score
    total_reviews = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    reviews = relationship("DetailedReview", back_populates="place")
