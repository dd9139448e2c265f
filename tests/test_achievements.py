"""Tests for achievement granting and the incomplete-achievements digest."""

from sqlalchemy import func, select

from bocado.core.catalog import ACHIEVEMENT_TIERS, Category
from bocado.db.init_db import seed_achievements
from bocado.models.achievement import Achievement, UserAchievement
from bocado.models.review import DetailedReview
from bocado.schemas.achievement import AchievementProgress
from bocado.schemas.place import PlaceCandidate
from bocado.services.achievements import (
    check_and_grant_achievements,
    get_achievements_statistics,
    get_category_achievements_progress,
    get_incomplete_achievements,
    get_user_all_achievements,
    select_incomplete_achievements,
)
from bocado.services.place_resolver import resolve_or_create_place


def _progress(category: str, level: int, current: int, required: int, unlocked: bool = False) -> AchievementProgress:
    return AchievementProgress(
        achievement_id=f"{category}-{level}",
        category=category,
        name=f"{category} {level}",
        level=level,
        required_reviews=required,
        points_reward=100,
        is_unlocked=unlocked,
        current_progress=current,
        progress_percentage=min(100.0, current * 100.0 / required),
    )


def _add_reviews(db, user_id: str, category: str, count: int) -> None:
    for index in range(count):
        place = resolve_or_create_place(
            db, PlaceCandidate(external_id=f"ext-{category}-{index}", name=f"Lugar {index}")
        )
        db.add(
            DetailedReview(
                user_id=user_id,
                place_id=place.id,
                food_taste=8,
                presentation=8,
                portion_size=8,
                music_acoustics=8,
                ambiance=8,
                furniture_comfort=8,
                service=8,
                price_range="under_10000",
                category=category,
            )
        )
    db.commit()


class TestSeeding:

    def test_every_category_has_the_full_ladder(self, db):
        total = db.execute(select(func.count(Achievement.id))).scalar_one()

        assert total == len(Category) * len(ACHIEVEMENT_TIERS)

    def test_seeding_is_idempotent(self, db):
        assert seed_achievements(db) == 0


class TestCheckAndGrant:

    def test_grants_each_crossed_level_once(self, db, user):
        _add_reviews(db, user.id, "PIZZERIAS", 5)

        first = check_and_grant_achievements(db, user.id, "PIZZERIAS")
        second = check_and_grant_achievements(db, user.id, "PIZZERIAS")

        assert [a.level for a in first] == [1, 2]
        assert second == []
        grants = db.execute(
            select(func.count(UserAchievement.id)).where(UserAchievement.user_id == user.id)
        ).scalar_one()
        assert grants == 2

    def test_nothing_granted_below_threshold(self, db, user):
        assert check_and_grant_achievements(db, user.id, "PASTAS") == []

    def test_progress_reports_unlocked_levels(self, db, user):
        _add_reviews(db, user.id, "PARRILLAS", 3)
        check_and_grant_achievements(db, user.id, "PARRILLAS")

        rows = get_category_achievements_progress(db, user.id, "PARRILLAS")

        assert [r.level for r in rows] == [1, 2, 3, 4, 5]
        assert rows[0].is_unlocked and rows[0].unlocked_at is not None
        assert not rows[1].is_unlocked
        assert rows[1].current_progress == 3
        assert rows[1].progress_percentage == 60.0

    def test_statistics_and_unlocked_list(self, db, user):
        _add_reviews(db, user.id, "BARES", 1)
        check_and_grant_achievements(db, user.id, "BARES")

        mine = get_user_all_achievements(db, user.id)
        stats = get_achievements_statistics(db, user.id)

        assert [a.category for a in mine] == ["BARES"]
        assert stats.unlocked_achievements == 1
        assert stats.total_achievements == len(Category) * len(ACHIEVEMENT_TIERS)
        assert stats.total_points_from_achievements == ACHIEVEMENT_TIERS[0].points_reward
        assert stats.recent[0].achievement_id == mine[0].achievement_id


class TestSelectIncompleteAchievements:

    def test_started_before_unstarted_then_by_level(self):
        rows = [
            _progress("C", 2, 0, 5),
            _progress("B", 1, 0, 1),
            _progress("A", 2, 2, 5),
        ]

        result = select_incomplete_achievements(rows)

        assert [r.category for r in result] == ["A", "B", "C"]

    def test_one_representative_per_category(self):
        rows = [
            _progress("A", 1, 3, 1, unlocked=True),
            _progress("A", 2, 3, 5),
            _progress("A", 3, 3, 10),
        ]

        result = select_incomplete_achievements(rows)

        assert len(result) == 1
        assert result[0].level == 2

    def test_unstarted_category_prefers_lowest_level(self):
        rows = [_progress("A", 3, 0, 10), _progress("A", 1, 0, 1), _progress("A", 2, 0, 5)]

        assert select_incomplete_achievements(rows)[0].level == 1

    def test_limit_applies(self):
        rows = [_progress(f"K{i}", 1, 0, 1) for i in range(10)]

        assert len(select_incomplete_achievements(rows, limit=6)) == 6


class TestIncompleteAchievements:

    def test_anonymous_gets_level_one_of_each_category(self, db):
        result = get_incomplete_achievements(db, None)

        assert len(result) == 6
        assert all(r.level == 1 and r.current_progress == 0 for r in result)

    def test_user_in_progress_category_comes_first(self, db, user):
        _add_reviews(db, user.id, "HELADERIAS", 3)
        check_and_grant_achievements(db, user.id, "HELADERIAS")

        result = get_incomplete_achievements(db, user.id)

        assert result[0].category == "HELADERIAS"
        assert result[0].level == 2
        assert result[0].progress_percentage == 60.0
        assert all(r.current_progress == 0 for r in result[1:])
