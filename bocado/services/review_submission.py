"""Review submission: place resolution, duplicate guard, points and achievements."""

from __future__ import annotations

from dataclasses import dataclass, field

import structlog
from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from bocado.core.exceptions import (
    AchievementEvaluationFailed,
    BocadoError,
    DuplicateReview,
    Forbidden,
    IncompletePlaceData,
    NotFound,
    PlaceResolutionFailed,
    ReviewInsertFailed,
)
from bocado.models.place import Place
from bocado.models.points import PointsHistory
from bocado.models.review import DetailedReview, ReviewPhoto
from bocado.schemas.review import ReviewDraft, UnlockedAchievement
from bocado.services.achievements import evaluate_achievements
from bocado.services.ledger import credit_points
from bocado.services.notifications import create_notification
from bocado.services.place_resolver import is_temporary_place_id, resolve_or_create_place
from bocado.services.points import PointsBreakdown, compute_points

logger = structlog.get_logger(__name__)


@dataclass
class SubmissionResult:
    review_id: str
    place_id: str
    points: PointsBreakdown
    achievements: list[UnlockedAchievement] = field(default_factory=list)


def _resolve_place(db: Session, draft: ReviewDraft) -> Place:
    candidate = draft.place
    if candidate.id and not is_temporary_place_id(candidate.id):
        place = db.get(Place, candidate.id)
        if place is None:
            raise PlaceResolutionFailed("Place does not exist", {"place_id": candidate.id})
        return place
    if not candidate.external_id:
        raise IncompletePlaceData("Place data is incomplete: missing external place id")
    return resolve_or_create_place(db, candidate, commit=False)


def find_user_review(db: Session, user_id: str, place_id: str) -> DetailedReview | None:
    return db.execute(
        select(DetailedReview).where(
            DetailedReview.user_id == user_id,
            DetailedReview.place_id == place_id,
        )
    ).scalar_one_or_none()


def _claim_first_review(db: Session, place_id: str) -> bool:
    """Count the new review on the place; True only for the one that takes it from 0 to 1."""
    claimed = db.execute(
        update(Place)
        .where(Place.id == place_id, Place.total_reviews == 0)
        .values(total_reviews=1)
        .execution_options(synchronize_session=False)
    ).rowcount
    if claimed == 1:
        return True
    db.execute(
        update(Place)
        .where(Place.id == place_id)
        .values(total_reviews=Place.total_reviews + 1)
        .execution_options(synchronize_session=False)
    )
    return False


def first_review_bonus_paid(db: Session, user_id: str, place_id: str) -> bool:
    """True when the user already earned the first-review bonus for the place.

    The ledger outlives deleted reviews, so deleting and resubmitting does not
    pay the bonus twice.
    """
    return db.execute(
        select(PointsHistory.id)
        .where(
            PointsHistory.user_id == user_id,
            PointsHistory.place_id == place_id,
            PointsHistory.action_type == "review_new_place",
        )
        .limit(1)
    ).first() is not None


def refresh_place_rating(db: Session, place: Place) -> None:
    reviews = db.execute(select(DetailedReview).where(DetailedReview.place_id == place.id)).scalars().all()
    place.rating = round(sum(r.overall_rating for r in reviews) / len(reviews), 2) if reviews else 0.0


def _build_review(user_id: str, place_id: str, draft: ReviewDraft) -> DetailedReview:
    review = DetailedReview(
        user_id=user_id,
        place_id=place_id,
        dish_name=draft.dish_name,
        food_taste=draft.food_taste,
        presentation=draft.presentation,
        portion_size=draft.portion_size,
        music_acoustics=draft.music_acoustics,
        ambiance=draft.ambiance,
        furniture_comfort=draft.furniture_comfort,
        service=draft.service,
        drinks_variety=draft.drinks_variety,
        cleanliness=draft.cleanliness,
        celiac_friendly=draft.celiac_friendly,
        vegetarian_friendly=draft.vegetarian_friendly,
        price_range=draft.price_range.value,
        category=draft.category.value,
        comment=draft.comment,
    )
    review.photos = [
        ReviewPhoto(url=url, position=index, is_primary=index == 0)
        for index, url in enumerate(draft.photo_urls)
    ]
    return review


def submit_review(db: Session, user_id: str, draft: ReviewDraft) -> SubmissionResult:
    """Persist a review and award its points in one transaction.

    Nothing is committed unless the place resolves, the user has no review
    for it yet and the insert succeeds. Achievement evaluation runs after the
    commit; its failure is logged and does not affect the result.
    """
    log = logger.bind(user_id=user_id, external_id=draft.place.external_id)
    try:
        place = _resolve_place(db, draft)

        if find_user_review(db, user_id, place.id):
            raise DuplicateReview(user_id, place.id)

        review = _build_review(user_id, place.id, draft)
        try:
            with db.begin_nested():
                db.add(review)
        except IntegrityError as exc:
            # lost a race with a concurrent submission for the same place
            if find_user_review(db, user_id, place.id):
                raise DuplicateReview(user_id, place.id) from exc
            raise ReviewInsertFailed("Could not save the review") from exc

        claimed = _claim_first_review(db, place.id)
        is_first_review = claimed and not first_review_bonus_paid(db, user_id, place.id)
        points = compute_points(
            is_first_review=is_first_review,
            has_photos=bool(draft.photo_urls),
            comment_length=len(draft.comment or ""),
        )

        db.refresh(place, attribute_names=["total_reviews"])
        if place.category is None:
            place.category = review.category
        refresh_place_rating(db, place)

        credit_points(db, user_id, points.ledger_entries(), review_id=review.id, place_id=place.id)
        create_notification(
            db,
            user_id,
            "review_published",
            "¡Reseña publicada!",
            f"Tu reseña de {place.name} ya está visible.",
            {"review_id": review.id, "place_id": place.id},
        )
        create_notification(
            db,
            user_id,
            "points_earned",
            f"¡Ganaste {points.total_points} puntos!",
            f"Por tu reseña de {place.name}.",
            {"review_id": review.id, "points": points.total_points},
        )
        db.commit()
    except BocadoError:
        db.rollback()
        raise
    except SQLAlchemyError as exc:
        db.rollback()
        log.error("review_insert_failed", error=str(exc))
        raise ReviewInsertFailed("Could not save the review") from exc

    log.info(
        "review_submitted",
        review_id=review.id,
        place_id=place.id,
        first_review=is_first_review,
        points=points.total_points,
    )

    result = SubmissionResult(review_id=review.id, place_id=place.id, points=points)
    try:
        result.achievements = evaluate_achievements(db, user_id, review.category)
    except AchievementEvaluationFailed as exc:
        log.error("achievement_evaluation_failed", review_id=review.id, error=str(exc))
    return result


def submission_message(result: SubmissionResult) -> str:
    message = f"¡Reseña enviada exitosamente! Ganaste {result.points.total_points} puntos."
    if result.achievements:
        names = ", ".join(a.name for a in result.achievements)
        message += f" Nuevos logros: {names}."
    return message


def delete_review(db: Session, user_id: str, review_id: str) -> list[str]:
    """Delete the user's own review and return the photo URLs that belonged to it.

    Points already awarded are kept; the place counters and rating are updated.
    """
    review = db.get(DetailedReview, review_id)
    if review is None:
        raise NotFound("Review not found", {"review_id": review_id})
    if review.user_id != user_id:
        raise Forbidden("You cannot delete this review", {"review_id": review_id})

    photo_urls = review.photo_urls
    place = review.place
    try:
        db.delete(review)
        db.flush()
        remaining = db.execute(
            select(func.count(DetailedReview.id)).where(DetailedReview.place_id == place.id)
        ).scalar_one()
        place.total_reviews = remaining
        refresh_place_rating(db, place)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise

    logger.info(
        "review_deleted",
        user_id=user_id,
        review_id=review_id,
        place_id=place.id,
        category=review.category,
    )
    return photo_urls
