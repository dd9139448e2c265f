"""Review endpoints."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from bocado.api.deps import get_current_user
from bocado.core.exceptions import Forbidden
from bocado.db.session import get_db
from bocado.models.user import User
from bocado.schemas.review import (
    DishRecommendation,
    PointsBreakdownOut,
    ReviewDraft,
    ReviewOut,
    SubmissionResponse,
)
from bocado.services.photos import PhotoService, get_photo_service
from bocado.services.review_submission import delete_review, submission_message, submit_review
from bocado.services.reviews import get_dish_recommendations, get_review

router = APIRouter(prefix="/reviews", tags=["reviews"])


@router.post("", response_model=SubmissionResponse, status_code=status.HTTP_201_CREATED)
def create_review(
    payload: ReviewDraft,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
    photos: PhotoService = Depends(get_photo_service),
) -> SubmissionResponse:
    """Submit a review; the response carries the points breakdown and new achievements."""
    foreign = [url for url in payload.photo_urls if not photos.owns_photo(user.id, url)]
    if foreign:
        raise Forbidden("Photos must be uploaded by the reviewer", {"photo_urls": foreign})

    result = submit_review(db, user.id, payload)
    return SubmissionResponse(
        review_id=result.review_id,
        place_id=result.place_id,
        points=PointsBreakdownOut.model_validate(result.points),
        achievements=result.achievements,
        message=submission_message(result),
    )


@router.get("/recommendations", response_model=list[DishRecommendation])
def recommendations(db: Session = Depends(get_db)) -> list[DishRecommendation]:
    return get_dish_recommendations(db)


@router.get("/{review_id}", response_model=ReviewOut)
def read_review(review_id: str, db: Session = Depends(get_db)) -> ReviewOut:
    return ReviewOut.model_validate(get_review(db, review_id))


@router.delete("/{review_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_review(
    review_id: str,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
    photos: PhotoService = Depends(get_photo_service),
) -> None:
    for url in delete_review(db, user.id, review_id):
        # only blobs under the caller's key prefix
        if photos.owns_photo(user.id, url):
            photos.delete_photo(url)
