"""Category achievement progress, granting and the incomplete-achievements digest."""

from __future__ import annotations

from typing import Iterable

import structlog
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from bocado.core.catalog import Category
from bocado.core.config import settings
from bocado.core.exceptions import AchievementEvaluationFailed
from bocado.models.achievement import Achievement, UserAchievement
from bocado.models.review import DetailedReview
from bocado.schemas.achievement import AchievementProgress, AchievementStatistics
from bocado.schemas.review import UnlockedAchievement
from bocado.services.ledger import credit_points
from bocado.services.notifications import create_notification

logger = structlog.get_logger(__name__)


def count_user_reviews_in_category(db: Session, user_id: str, category: str) -> int:
    return db.execute(
        select(func.count(DetailedReview.id)).where(
            DetailedReview.user_id == user_id,
            DetailedReview.category == category,
        )
    ).scalar_one()


def _definitions(db: Session, category: str) -> list[Achievement]:
    return list(
        db.execute(
            select(Achievement).where(Achievement.category == category).order_by(Achievement.level)
        ).scalars()
    )


def _granted(db: Session, user_id: str, achievement_ids: Iterable[str]) -> dict[str, UserAchievement]:
    ids = list(achievement_ids)
    if not ids:
        return {}
    rows = db.execute(
        select(UserAchievement).where(
            UserAchievement.user_id == user_id,
            UserAchievement.achievement_id.in_(ids),
        )
    ).scalars()
    return {row.achievement_id: row for row in rows}


def _progress_row(
    achievement: Achievement,
    current_progress: int,
    grant: UserAchievement | None,
) -> AchievementProgress:
    percentage = min(100.0, round(current_progress * 100.0 / achievement.required_reviews, 2))
    return AchievementProgress(
        achievement_id=achievement.id,
        category=achievement.category,
        name=achievement.name,
        description=achievement.description,
        level=achievement.level,
        required_reviews=achievement.required_reviews,
        points_reward=achievement.points_reward,
        icon=achievement.icon,
        color=achievement.color,
        is_unlocked=grant is not None or current_progress >= achievement.required_reviews,
        current_progress=current_progress,
        progress_percentage=percentage,
        unlocked_at=grant.unlocked_at if grant else None,
    )


def get_category_achievements_progress(db: Session, user_id: str, category: str) -> list[AchievementProgress]:
    """Every achievement of the category with the user's progress, by level."""
    definitions = _definitions(db, category)
    progress = count_user_reviews_in_category(db, user_id, category)
    granted = _granted(db, user_id, (a.id for a in definitions))
    return [_progress_row(a, progress, granted.get(a.id)) for a in definitions]


def _unlocked(achievement: Achievement) -> UnlockedAchievement:
    return UnlockedAchievement(
        achievement_id=achievement.id,
        category=achievement.category,
        level=achievement.level,
        name=achievement.name,
        description=achievement.description,
        icon=achievement.icon,
        color=achievement.color,
        required_reviews=achievement.required_reviews,
        points_reward=achievement.points_reward,
    )


def check_and_grant_achievements(db: Session, user_id: str, category: str) -> list[UnlockedAchievement]:
    """Grant every achievement of `category` the user now qualifies for.

    Each grant is an insert guarded by the (user, achievement) unique
    constraint, so an achievement is emitted at most once no matter how many
    times (or how concurrently) this runs. Newly unlocked achievements come
    back ordered by ascending level.
    """
    try:
        definitions = _definitions(db, category)
        progress = count_user_reviews_in_category(db, user_id, category)
        granted = _granted(db, user_id, (a.id for a in definitions))

        newly_unlocked: list[UnlockedAchievement] = []
        for achievement in definitions:
            if achievement.required_reviews > progress or achievement.id in granted:
                continue
            try:
                with db.begin_nested():
                    db.add(UserAchievement(user_id=user_id, achievement_id=achievement.id))
            except IntegrityError:
                # granted concurrently by another evaluation
                continue

            if achievement.points_reward:
                credit_points(
                    db,
                    user_id,
                    [("achievement_reward", achievement.points_reward, f"Logro: {achievement.name}")],
                )
            create_notification(
                db,
                user_id,
                "achievement_unlocked",
                f"¡Logro desbloqueado: {achievement.name}!",
                achievement.description or achievement.name,
                {
                    "achievement_id": achievement.id,
                    "category": achievement.category,
                    "level": achievement.level,
                    "points_reward": achievement.points_reward,
                },
            )
            newly_unlocked.append(_unlocked(achievement))

        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        raise AchievementEvaluationFailed(
            "Could not evaluate achievements", {"user_id": user_id, "category": category}
        ) from exc

    if newly_unlocked:
        logger.info(
            "achievements_unlocked",
            user_id=user_id,
            category=category,
            levels=[a.level for a in newly_unlocked],
        )
    return newly_unlocked


evaluate_achievements = check_and_grant_achievements


def _beats(candidate: AchievementProgress, current: AchievementProgress) -> bool:
    if candidate.current_progress > 0 and current.current_progress == 0:
        return True
    if candidate.current_progress > 0 and current.current_progress > 0:
        return candidate.progress_percentage > current.progress_percentage
    if candidate.current_progress == 0 and current.current_progress == 0:
        return candidate.level < current.level
    return False


def _display_order(item: AchievementProgress) -> tuple:
    if item.current_progress > 0:
        return (0, -item.progress_percentage, 0)
    return (1, 0.0, item.level)


def select_incomplete_achievements(
    rows: Iterable[AchievementProgress],
    limit: int = 6,
) -> list[AchievementProgress]:
    """Reduce per-category progress rows to one locked achievement per category.

    Within a category: started beats not started, then higher percentage,
    and among unstarted ones the lowest level. The representatives are listed
    started-first by descending percentage, then unstarted by ascending level.
    """
    best: dict[str, AchievementProgress] = {}
    for row in rows:
        if row.is_unlocked:
            continue
        current = best.get(row.category)
        if current is None or _beats(row, current):
            best[row.category] = row
    return sorted(best.values(), key=_display_order)[:limit]


def _level_one_rows(db: Session) -> list[AchievementProgress]:
    rows = db.execute(select(Achievement).where(Achievement.level == 1)).scalars()
    return [_progress_row(a, 0, None) for a in rows]


def get_incomplete_achievements(
    db: Session,
    user_id: str | None,
    limit: int | None = None,
) -> list[AchievementProgress]:
    """Top locked achievements across categories; anonymous users get level 1 of each."""
    limit = limit or settings.incomplete_achievements_limit
    if user_id is None:
        return select_incomplete_achievements(_level_one_rows(db), limit)

    rows: list[AchievementProgress] = []
    for category in Category:
        rows.extend(get_category_achievements_progress(db, user_id, category.value))
    return select_incomplete_achievements(rows, limit)


def get_user_all_achievements(db: Session, user_id: str) -> list[AchievementProgress]:
    """Unlocked achievements, most recent first."""
    rows = db.execute(
        select(UserAchievement, Achievement)
        .join(Achievement, Achievement.id == UserAchievement.achievement_id)
        .where(UserAchievement.user_id == user_id)
        .order_by(UserAchievement.unlocked_at.desc(), Achievement.level.desc())
    ).all()
    result = []
    for grant, achievement in rows:
        progress = count_user_reviews_in_category(db, user_id, achievement.category)
        result.append(_progress_row(achievement, progress, grant))
    return result


def get_achievements_statistics(db: Session, user_id: str, recent_limit: int = 5) -> AchievementStatistics:
    total = db.execute(select(func.count(Achievement.id))).scalar_one()
    unlocked = get_user_all_achievements(db, user_id)
    return AchievementStatistics(
        total_achievements=total,
        unlocked_achievements=len(unlocked),
        completion_percentage=round(len(unlocked) * 100.0 / total, 2) if total else 0.0,
        total_points_from_achievements=sum(a.points_reward for a in unlocked),
        recent=unlocked[:recent_limit],
    )
