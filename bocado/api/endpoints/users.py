"""User profile and level endpoints."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from bocado.api.deps import get_current_user
from bocado.db.session import get_db
from bocado.models.user import User
from bocado.schemas.review import ReviewOut
from bocado.schemas.user import LevelOut, PointsHistoryOut, UserLevelOut, UserProfile
from bocado.services.reviews import get_user_reviews
from bocado.services.users import (
    get_all_user_levels,
    get_current_points,
    get_points_history,
    get_user_level,
    get_user_profile,
)

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/levels", response_model=list[LevelOut])
def levels() -> list[LevelOut]:
    return get_all_user_levels()


@router.get("/me", response_model=UserProfile)
def me(db: Session = Depends(get_db), user: User = Depends(get_current_user)) -> UserProfile:
    return get_user_profile(db, user)


@router.get("/me/reviews", response_model=list[ReviewOut])
def my_reviews(db: Session = Depends(get_db), user: User = Depends(get_current_user)) -> list[ReviewOut]:
    return [ReviewOut.model_validate(r) for r in get_user_reviews(db, user.id)]


@router.get("/me/points-history", response_model=list[PointsHistoryOut])
def points_history(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
) -> list[PointsHistoryOut]:
    return [PointsHistoryOut.model_validate(row) for row in get_points_history(db, user.id)]


@router.get("/me/level", response_model=UserLevelOut)
def my_level(db: Session = Depends(get_db), user: User = Depends(get_current_user)) -> UserLevelOut:
    # read fresh, the cached row may predate a concurrent credit
    return get_user_level(get_current_points(db, user.id))
