"""Read-side review queries."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from bocado.core.exceptions import NotFound
from bocado.models.review import DetailedReview, ReviewPhoto
from bocado.schemas.place import PlaceOut
from bocado.schemas.review import DishRecommendation, ReviewUser

RECOMMENDATIONS_LIMIT = 4


def _with_relations(stmt):
    return stmt.options(
        selectinload(DetailedReview.photos),
        selectinload(DetailedReview.user),
        selectinload(DetailedReview.place),
    )


def get_review(db: Session, review_id: str) -> DetailedReview:
    review = db.execute(
        _with_relations(select(DetailedReview).where(DetailedReview.id == review_id))
    ).scalar_one_or_none()
    if review is None:
        raise NotFound("Review not found", {"review_id": review_id})
    return review


def get_place_reviews(db: Session, place_id: str) -> list[DetailedReview]:
    return list(
        db.execute(
            _with_relations(
                select(DetailedReview)
                .where(DetailedReview.place_id == place_id)
                .order_by(DetailedReview.created_at.desc())
            )
        ).scalars()
    )


def get_user_reviews(db: Session, user_id: str) -> list[DetailedReview]:
    return list(
        db.execute(
            _with_relations(
                select(DetailedReview)
                .where(DetailedReview.user_id == user_id)
                .order_by(DetailedReview.created_at.desc())
            )
        ).scalars()
    )


def get_dish_recommendations(db: Session, limit: int = RECOMMENDATIONS_LIMIT) -> list[DishRecommendation]:
    """Latest reviews that name a dish and carry at least one photo."""
    reviews = db.execute(
        _with_relations(
            select(DetailedReview)
            .where(
                DetailedReview.dish_name.is_not(None),
                DetailedReview.dish_name != "",
                DetailedReview.photos.any(ReviewPhoto.url.is_not(None)),
            )
            .order_by(DetailedReview.created_at.desc())
            .limit(limit)
        )
    ).scalars()
    return [
        DishRecommendation(
            review_id=review.id,
            dish_name=review.dish_name,
            photo_url=review.primary_photo_url,
            place=PlaceOut.model_validate(review.place),
            user=ReviewUser.model_validate(review.user),
        )
        for review in reviews
    ]
