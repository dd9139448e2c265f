"""Google Places web service client scoped to the Rosario area."""

from __future__ import annotations

import re
from typing import Any

import httpx
import structlog

from bocado.core.config import settings
from bocado.core.exceptions import ExternalApiUnavailable

logger = structlog.get_logger(__name__)

PLACES_API_BASE = "https://maps.googleapis.com/maps/api/place"

FOOD_TYPES = {"restaurant", "food", "meal_takeaway", "bakery", "cafe", "bar"}
DETAIL_FIELDS = (
    "place_id,name,formatted_address,geometry,formatted_phone_number,website,"
    "opening_hours,rating,user_ratings_total,photos,types,price_level"
)
# Rosario postal codes are 2000-2099
_ROSARIO_POSTAL_CODE = re.compile(r"\b20\d{2}\b")


def is_food_place(result: dict[str, Any]) -> bool:
    return any(t in FOOD_TYPES for t in result.get("types") or [])


def is_in_target_region(result: dict[str, Any]) -> bool:
    address = (result.get("formatted_address") or "").lower()
    return (
        "rosario" in address
        or "santa fe" in address
        or "sf" in address
        or bool(_ROSARIO_POSTAL_CODE.search(address))
    )


class MapsClient:
    """Text search, details and photo URLs; every call is bounded by a timeout."""

    def __init__(
        self,
        api_key: str | None = None,
        timeout: float | None = None,
        http_client: httpx.Client | None = None,
    ) -> None:
        self.api_key = api_key if api_key is not None else settings.google_maps_api_key
        self._client = http_client or httpx.Client(
            base_url=PLACES_API_BASE,
            timeout=timeout or settings.maps_timeout_seconds,
        )

    def _get(self, path: str, params: dict[str, Any]) -> dict[str, Any]:
        if not self.api_key:
            raise ExternalApiUnavailable("google_maps", "API key not configured")
        try:
            response = self._client.get(path, params={**params, "key": self.api_key})
            response.raise_for_status()
        except httpx.TimeoutException as exc:
            raise ExternalApiUnavailable("google_maps", "request timed out", timed_out=True) from exc
        except httpx.HTTPError as exc:
            logger.error("maps_request_failed", path=path, error=str(exc))
            raise ExternalApiUnavailable("google_maps", "request failed") from exc
        return response.json()

    def search_places(self, query: str) -> list[dict[str, Any]]:
        """Food places matching `query` within the configured radius of the city center."""
        data = self._get(
            "/textsearch/json",
            {
                "query": query,
                "location": f"{settings.maps_center_lat},{settings.maps_center_lng}",
                "radius": settings.maps_radius_meters,
                "region": "ar",
                "language": "es",
                "type": "establishment",
            },
        )
        status = data.get("status")
        if status not in ("OK", "ZERO_RESULTS"):
            raise ExternalApiUnavailable("google_maps", data.get("error_message") or f"status {status}")

        results = data.get("results") or []
        food = [r for r in results if is_food_place(r)]
        local = [r for r in food if is_in_target_region(r)]
        logger.info(
            "maps_search",
            query=query,
            total=len(results),
            food_places=len(food),
            in_region=len(local),
        )
        return local

    def place_details(self, external_id: str) -> dict[str, Any]:
        data = self._get(
            "/details/json",
            {"place_id": external_id, "fields": DETAIL_FIELDS, "language": "es"},
        )
        if data.get("status") != "OK":
            raise ExternalApiUnavailable("google_maps", data.get("error_message") or f"status {data.get('status')}")
        return data.get("result") or {}

    def photo_url(self, photo_reference: str, max_width: int = 400) -> str:
        if not self.api_key:
            raise ExternalApiUnavailable("google_maps", "API key not configured")
        return str(
            httpx.URL(
                f"{PLACES_API_BASE}/photo",
                params={"maxwidth": max_width, "photo_reference": photo_reference, "key": self.api_key},
            )
        )


_maps_client_instance: MapsClient | None = None


def get_maps_client() -> MapsClient:
    """Lazy initialization of the maps client."""
    global _maps_client_instance
    if _maps_client_instance is None:
        _maps_client_instance = MapsClient()
    return _maps_client_instance
