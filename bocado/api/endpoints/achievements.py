"""Achievement endpoints."""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from bocado.api.deps import get_current_user, get_optional_user
from bocado.core.catalog import Category
from bocado.db.session import get_db
from bocado.models.user import User
from bocado.schemas.achievement import AchievementProgress, AchievementStatistics
from bocado.services.achievements import (
    get_achievements_statistics,
    get_category_achievements_progress,
    get_incomplete_achievements,
    get_user_all_achievements,
)

router = APIRouter(prefix="/achievements", tags=["achievements"])


@router.get("/progress", response_model=list[AchievementProgress])
def incomplete_progress(
    limit: Optional[int] = Query(None, ge=1, le=50),
    db: Session = Depends(get_db),
    user: Optional[User] = Depends(get_optional_user),
) -> list[AchievementProgress]:
    """One locked achievement per category, the closest ones first."""
    return get_incomplete_achievements(db, user.id if user else None, limit)


@router.get("/categories/{category}", response_model=list[AchievementProgress])
def category_progress(
    category: Category,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
) -> list[AchievementProgress]:
    return get_category_achievements_progress(db, user.id, category.value)


@router.get("/statistics", response_model=AchievementStatistics)
def statistics(db: Session = Depends(get_db), user: User = Depends(get_current_user)) -> AchievementStatistics:
    return get_achievements_statistics(db, user.id)


@router.get("/mine", response_model=list[AchievementProgress])
def my_achievements(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
) -> list[AchievementProgress]:
    return get_user_all_achievements(db, user.id)
