"""User model (local mirror of the auth provider identity)."""

from sqlalchemy import Column, DateTime, Integer, String
from sqlalchemy.orm import relationship

from bocado.db.base import Base
from bocado.models._common import utcnow


class User(Base):
    """Reviewer profile and running points total."""

    __tablename__ = "users"

    id = Column(String(64), primary_key=True)  # auth provider user id
    email = Column(String(255))
    full_name = Column(String(255))
    avatar_url = Column(String(1024))
    points = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    reviews = relationship("DetailedReview", back_populates="user")
