"""Points crediting shared by review submission and achievement grants."""

from __future__ import annotations

from typing import Iterable

import structlog
from sqlalchemy import select, update
from sqlalchemy.orm import Session

from bocado.models.points import PointsHistory
from bocado.models.user import User
from bocado.services.notifications import create_notification
from bocado.services.points import level_for_points

logger = structlog.get_logger(__name__)


def credit_points(
    db: Session,
    user_id: str,
    entries: Iterable[tuple[str, int, str]],
    review_id: str | None = None,
    place_id: str | None = None,
) -> int:
    """Append ledger rows and add their sum to the user's total.

    The increment is a single UPDATE so concurrent credits do not overwrite
    each other. Records a level_up notification when the total crosses into a
    higher level. Returns the new total. Does not commit.
    """
    entries = list(entries)
    amount = sum(points for _, points, _ in entries)
    for action_type, points, description in entries:
        db.add(
            PointsHistory(
                user_id=user_id,
                review_id=review_id,
                place_id=place_id,
                action_type=action_type,
                points_earned=points,
                description=description,
            )
        )

    db.execute(update(User).where(User.id == user_id).values(points=User.points + amount))
    after = db.execute(select(User.points).where(User.id == user_id)).scalar_one()
    before = after - amount

    old_level, new_level = level_for_points(before), level_for_points(after)
    if new_level.level_number > old_level.level_number:
        create_notification(
            db,
            user_id,
            "level_up",
            f"¡Subiste a {new_level.name}!",
            f"Alcanzaste el nivel {new_level.name} con {after} puntos.",
            {"level_number": new_level.level_number, "level_name": new_level.name, "points": after},
        )
        logger.info("user_level_up", user_id=user_id, level=new_level.level_number, points=after)
    return after
