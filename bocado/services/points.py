"""Points breakdown and user level computation."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from bocado.core.catalog import USER_LEVELS, LevelTier

BASE_POINTS = 100
FIRST_REVIEW_BONUS = 500
PHOTO_BONUS = 50
EXTENDED_REVIEW_BONUS = 50
EXTENDED_REVIEW_MIN_CHARS = 300


@dataclass(frozen=True)
class PointsBreakdown:
    base_points: int
    first_review_bonus: int
    photo_bonus: int
    extended_review_bonus: int

    @property
    def total_points(self) -> int:
        return self.base_points + self.first_review_bonus + self.photo_bonus + self.extended_review_bonus

    def ledger_entries(self) -> list[tuple[str, int, str]]:
        """(action_type, points, description) rows for the points history."""
        entries = [
            (
                "review_new_place" if self.first_review_bonus else "review_existing_place",
                self.base_points + self.first_review_bonus,
                "Primera reseña del lugar" if self.first_review_bonus else "Reseña publicada",
            )
        ]
        if self.photo_bonus:
            entries.append(("add_photo", self.photo_bonus, "Reseña con fotos"))
        if self.extended_review_bonus:
            entries.append(("extended_review", self.extended_review_bonus, "Reseña extendida"))
        return entries


def compute_points(is_first_review: bool, has_photos: bool, comment_length: int) -> PointsBreakdown:
    """Return the points awarded for one review submission."""
    return PointsBreakdown(
        base_points=BASE_POINTS,
        first_review_bonus=FIRST_REVIEW_BONUS if is_first_review else 0,
        photo_bonus=PHOTO_BONUS if has_photos else 0,
        extended_review_bonus=EXTENDED_REVIEW_BONUS if comment_length >= EXTENDED_REVIEW_MIN_CHARS else 0,
    )


@dataclass(frozen=True)
class UserLevelDetail:
    level_number: int
    level_name: str
    level_color: str
    level_icon: str
    min_points: int
    max_points: Optional[int]
    progress_percentage: float
    points_to_next_level: int
    next_level_name: Optional[str]


def level_for_points(points: int) -> LevelTier:
    current = USER_LEVELS[0]
    for tier in USER_LEVELS:
        if points >= tier.min_points:
            current = tier
    return current


def get_user_level_detailed(points: int) -> UserLevelDetail:
    """Level the given points total falls in, plus progress towards the next one."""
    points = max(points, 0)
    tier = level_for_points(points)
    following = [t for t in USER_LEVELS if t.level_number == tier.level_number + 1]
    if not following:
        return UserLevelDetail(
            level_number=tier.level_number,
            level_name=tier.name,
            level_color=tier.color,
            level_icon=tier.icon,
            min_points=tier.min_points,
            max_points=tier.max_points,
            progress_percentage=100.0,
            points_to_next_level=0,
            next_level_name=None,
        )

    nxt = following[0]
    span = nxt.min_points - tier.min_points
    progress = round((points - tier.min_points) * 100.0 / span, 2)
    return UserLevelDetail(
        level_number=tier.level_number,
        level_name=tier.name,
        level_color=tier.color,
        level_icon=tier.icon,
        min_points=tier.min_points,
        max_points=tier.max_points,
        progress_percentage=progress,
        points_to_next_level=nxt.min_points - points,
        next_level_name=nxt.name,
    )
