"""Find-or-create of internal places keyed by the mapping API place id."""

from __future__ import annotations

from datetime import datetime

import structlog
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from bocado.core.exceptions import IncompletePlaceData, PlaceResolutionFailed
from bocado.models.place import Place
from bocado.schemas.place import PlaceCandidate, SelectedPlace
from bocado.utils.address import clean_address

logger = structlog.get_logger(__name__)

TEMP_ID_PREFIX = "temp-"


def is_temporary_place_id(place_id: str | None) -> bool:
    return not place_id or place_id.startswith(TEMP_ID_PREFIX)


def make_temporary_place_id() -> str:
    return f"{TEMP_ID_PREFIX}{int(datetime.now().timestamp() * 1000)}"


def find_place_by_external_id(db: Session, external_id: str) -> Place | None:
    return db.execute(select(Place).where(Place.external_id == external_id)).scalar_one_or_none()


def resolve_or_create_place(db: Session, candidate: PlaceCandidate, commit: bool = True) -> Place:
    """Return the place for `candidate.external_id`, creating it on first reference.

    An existing row is returned untouched. With `commit=False` the insert is
    only flushed so the caller's transaction decides its fate.
    """
    if not candidate.external_id:
        raise IncompletePlaceData("Place data is incomplete: missing external place id")

    try:
        existing = find_place_by_external_id(db, candidate.external_id)
        if existing:
            return existing
        if not candidate.name:
            raise IncompletePlaceData(
                "Place data is incomplete: missing name",
                {"external_id": candidate.external_id},
            )

        place = Place(
            external_id=candidate.external_id,
            name=candidate.name,
            address=clean_address(candidate.address),
            latitude=candidate.latitude,
            longitude=candidate.longitude,
            phone=candidate.phone,
            website=candidate.website,
            category=None,
            rating=0.0,
            total_reviews=0,
        )
        # savepoint so a lost insert race does not poison the outer transaction
        with db.begin_nested():
            db.add(place)
        if commit:
            db.commit()
        logger.info("place_created", place_id=place.id, external_id=place.external_id)
        return place
    except IntegrityError:
        winner = find_place_by_external_id(db, candidate.external_id)
        if winner:
            return winner
        raise PlaceResolutionFailed(
            "Could not create place", {"external_id": candidate.external_id}
        )
    except SQLAlchemyError as exc:
        if commit:
            db.rollback()
        logger.error("place_resolution_failed", external_id=candidate.external_id, error=str(exc))
        raise PlaceResolutionFailed(
            "Could not resolve place", {"external_id": candidate.external_id}
        ) from exc


def select_place(db: Session, candidate: PlaceCandidate) -> SelectedPlace:
    """Resolve a place for display, falling back to a temporary id when creation fails.

    The temporary place is never persisted; review submission re-resolves it.
    """
    if candidate.id and not is_temporary_place_id(candidate.id):
        place = db.get(Place, candidate.id)
        if place:
            return SelectedPlace.model_validate(place)

    try:
        place = resolve_or_create_place(db, candidate)
        return SelectedPlace.model_validate(place)
    except PlaceResolutionFailed:
        logger.warning("place_selected_as_temporary", external_id=candidate.external_id)
        return SelectedPlace(
            id=make_temporary_place_id(),
            external_id=candidate.external_id,
            name=candidate.name or "",
            address=clean_address(candidate.address),
            latitude=candidate.latitude,
            longitude=candidate.longitude,
            phone=candidate.phone,
            website=candidate.website,
            rating=0.0,
            total_reviews=0,
            is_temporary=True,
        )
