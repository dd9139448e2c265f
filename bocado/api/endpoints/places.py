"""Place endpoints."""

from fastapi import APIRouter, Depends, Query
from fastapi.responses import RedirectResponse
from sqlalchemy.orm import Session

from bocado.core.catalog import Category
from bocado.db.session import get_db
from bocado.schemas.place import CategorySummary, MapPlace, MapPlaceDetails, PlaceCandidate, PlaceOut, SelectedPlace
from bocado.schemas.review import ReviewOut
from bocado.services.maps import MapsClient, get_maps_client
from bocado.services.place_resolver import select_place
from bocado.services.places import (
    annotate_map_details,
    annotate_map_results,
    get_category_summaries,
    get_place,
    get_places_by_category,
    search_local_places,
)
from bocado.services.reviews import get_place_reviews

router = APIRouter(prefix="/places", tags=["places"])


@router.get("/search", response_model=list[MapPlace])
def search_places(
    query: str = Query(..., min_length=1),
    db: Session = Depends(get_db),
    maps: MapsClient = Depends(get_maps_client),
) -> list[MapPlace]:
    """Search the mapping API around the city; results carry local review data."""
    return annotate_map_results(db, maps.search_places(query))


@router.get("/local", response_model=list[PlaceOut])
def search_local(query: str = Query(..., min_length=1), db: Session = Depends(get_db)) -> list[PlaceOut]:
    return [PlaceOut.model_validate(p) for p in search_local_places(db, query)]


@router.get("/details", response_model=MapPlaceDetails)
def place_details(
    place_id: str,
    db: Session = Depends(get_db),
    maps: MapsClient = Depends(get_maps_client),
) -> MapPlaceDetails:
    return annotate_map_details(db, maps.place_details(place_id))


@router.get("/photo")
def place_photo(
    photo_reference: str,
    maxwidth: int = Query(400, ge=1, le=1600),
    maps: MapsClient = Depends(get_maps_client),
) -> RedirectResponse:
    return RedirectResponse(maps.photo_url(photo_reference, maxwidth))


@router.post("/select", response_model=SelectedPlace)
def select(payload: PlaceCandidate, db: Session = Depends(get_db)) -> SelectedPlace:
    """Resolve the chosen map result to an internal place (or a temporary one)."""
    return select_place(db, payload)


@router.get("/categories", response_model=list[CategorySummary])
def categories(db: Session = Depends(get_db)) -> list[CategorySummary]:
    return get_category_summaries(db)


@router.get("/by-category/{category}", response_model=list[PlaceOut])
def places_by_category(category: Category, db: Session = Depends(get_db)) -> list[PlaceOut]:
    return [PlaceOut.model_validate(p) for p in get_places_by_category(db, category)]


@router.get("/{place_id}", response_model=PlaceOut)
def read_place(place_id: str, db: Session = Depends(get_db)) -> PlaceOut:
    return PlaceOut.model_validate(get_place(db, place_id))


@router.get("/{place_id}/reviews", response_model=list[ReviewOut])
def place_reviews(place_id: str, db: Session = Depends(get_db)) -> list[ReviewOut]:
    get_place(db, place_id)
    return [ReviewOut.model_validate(r) for r in get_place_reviews(db, place_id)]
