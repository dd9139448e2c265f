"""User profile statistics, points history and the level ladder."""

from __future__ import annotations

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from bocado.core.catalog import USER_LEVELS
from bocado.models.points import PointsHistory
from bocado.models.review import DetailedReview
from bocado.models.user import User
from bocado.schemas.user import LevelOut, UserLevelOut, UserProfile
from bocado.services.points import get_user_level_detailed

POINTS_HISTORY_LIMIT = 50


def get_user_level(points: int) -> UserLevelOut:
    return UserLevelOut.model_validate(get_user_level_detailed(points))


def get_user_profile(db: Session, user: User) -> UserProfile:
    reviews = db.execute(select(DetailedReview).where(DetailedReview.user_id == user.id)).scalars().all()
    ratings = [r.overall_rating for r in reviews]
    return UserProfile(
        id=user.id,
        email=user.email,
        full_name=user.full_name,
        avatar_url=user.avatar_url,
        points=user.points,
        total_reviews=len(reviews),
        places_reviewed=len({r.place_id for r in reviews}),
        average_rating=round(sum(ratings) / len(ratings), 2) if ratings else 0.0,
        level=get_user_level(user.points),
    )


def get_points_history(db: Session, user_id: str, limit: int = POINTS_HISTORY_LIMIT) -> list[PointsHistory]:
    return list(
        db.execute(
            select(PointsHistory)
            .where(PointsHistory.user_id == user_id)
            .order_by(PointsHistory.created_at.desc())
            .limit(limit)
        ).scalars()
    )


def get_current_points(db: Session, user_id: str) -> int:
    return db.execute(select(func.coalesce(User.points, 0)).where(User.id == user_id)).scalar_one()


def get_all_user_levels() -> list[LevelOut]:
    return [
        LevelOut(
            level_number=tier.level_number,
            level_name=tier.name,
            level_color=tier.color,
            level_icon=tier.icon,
            min_points=tier.min_points,
            max_points=tier.max_points,
            points_range=(
                f"{tier.min_points}+" if tier.max_points is None else f"{tier.min_points}-{tier.max_points}"
            ),
        )
        for tier in USER_LEVELS
    ]
