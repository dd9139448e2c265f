"""Database initialization utilities."""

import structlog
from sqlalchemy import select
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session

from bocado import models  # noqa: F401
from bocado.core.catalog import ACHIEVEMENT_TIERS, CATEGORY_INFO
from bocado.db.base import Base
from bocado.db.session import engine as default_engine
from bocado.models.achievement import Achievement

logger = structlog.get_logger(__name__)


def seed_achievements(db: Session) -> int:
    """Insert the missing (category, level) achievement definitions; returns how many."""
    existing = set(db.execute(select(Achievement.category, Achievement.level)).all())
    added = 0
    for category, info in CATEGORY_INFO.items():
        for tier in ACHIEVEMENT_TIERS:
            if (category.value, tier.level) in existing:
                continue
            db.add(
                Achievement(
                    category=category.value,
                    level=tier.level,
                    name=f"{tier.title}: {info.label}",
                    description=(
                        f"Reseñá {tier.required_reviews} "
                        f"{'lugar' if tier.required_reviews == 1 else 'lugares'} de {info.label}"
                    ),
                    icon=tier.icon,
                    color=info.color,
                    required_reviews=tier.required_reviews,
                    points_reward=tier.points_reward,
                )
            )
            added += 1
    db.commit()
    return added


def init_db(engine: Engine | None = None) -> None:
    """Create tables and seed reference data."""
    engine = engine or default_engine
    Base.metadata.create_all(bind=engine)
    with Session(engine) as db:
        added = seed_achievements(db)
    logger.info("database_initialized", achievements_seeded=added)
