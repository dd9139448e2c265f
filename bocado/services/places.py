"""Read-side place queries and map result annotation."""

from __future__ import annotations

from typing import Any

from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session

from bocado.core.catalog import CATEGORY_INFO, Category
from bocado.core.exceptions import NotFound
from bocado.models.place import Place
from bocado.schemas.place import CategorySummary, MapPlace, MapPlaceDetails
from bocado.utils.address import clean_address

LOCAL_SEARCH_LIMIT = 10


def get_place(db: Session, place_id: str) -> Place:
    place = db.get(Place, place_id)
    if place is None:
        raise NotFound("Place not found", {"place_id": place_id})
    return place


def search_local_places(db: Session, query: str, limit: int = LOCAL_SEARCH_LIMIT) -> list[Place]:
    """Known places whose name or address contains `query`, best rated first."""
    pattern = f"%{query.strip()}%"
    return list(
        db.execute(
            select(Place)
            .where(or_(Place.name.ilike(pattern), Place.address.ilike(pattern)))
            .order_by(Place.rating.desc(), Place.total_reviews.desc(), Place.name)
            .limit(limit)
        ).scalars()
    )


def get_places_by_category(db: Session, category: Category) -> list[Place]:
    return list(
        db.execute(
            select(Place)
            .where(Place.category == category.value)
            .order_by(Place.rating.desc(), Place.total_reviews.desc())
        ).scalars()
    )


def get_category_summaries(db: Session) -> list[CategorySummary]:
    """Every category with its label, color and number of places."""
    counts = dict(
        db.execute(
            select(Place.category, func.count(Place.id))
            .where(Place.category.is_not(None))
            .group_by(Place.category)
        ).all()
    )
    return [
        CategorySummary(
            category=category.value,
            label=info.label,
            color=info.color,
            place_count=counts.get(category.value, 0),
        )
        for category, info in CATEGORY_INFO.items()
    ]


def _local_stats(db: Session, external_ids: list[str]) -> dict[str, tuple[float, int]]:
    if not external_ids:
        return {}
    rows = db.execute(
        select(Place.external_id, Place.rating, Place.total_reviews).where(Place.external_id.in_(external_ids))
    ).all()
    return {external_id: (rating, total) for external_id, rating, total in rows}


def _map_fields(result: dict[str, Any], stats: dict[str, tuple[float, int]]) -> dict[str, Any]:
    location = (result.get("geometry") or {}).get("location") or {}
    photos = result.get("photos") or []
    rating, total = stats.get(result["place_id"], (0.0, 0))
    return {
        "external_id": result["place_id"],
        "name": result.get("name", ""),
        "address": clean_address(result.get("formatted_address")) or "",
        "latitude": location.get("lat"),
        "longitude": location.get("lng"),
        "types": result.get("types") or [],
        "google_rating": result.get("rating"),
        "local_rating": rating,
        "local_total_reviews": total,
        "photo_reference": photos[0].get("photo_reference") if photos else None,
    }


def annotate_map_results(db: Session, results: list[dict[str, Any]]) -> list[MapPlace]:
    """Attach local rating and review count to mapping API results."""
    stats = _local_stats(db, [r["place_id"] for r in results if r.get("place_id")])
    return [MapPlace(**_map_fields(r, stats)) for r in results if r.get("place_id")]


def annotate_map_details(db: Session, result: dict[str, Any]) -> MapPlaceDetails:
    stats = _local_stats(db, [result["place_id"]])
    hours = result.get("opening_hours") or {}
    return MapPlaceDetails(
        **_map_fields(result, stats),
        phone=result.get("formatted_phone_number"),
        website=result.get("website"),
        opening_hours=hours.get("weekday_text") or [],
        open_now=hours.get("open_now"),
    )
