"""Expose API endpoint routers."""

from bocado.api.endpoints import (
    achievements,
    client_log,
    enhance,
    notifications,
    photos,
    places,
    reviews,
    users,
)

__all__ = [
    "achievements",
    "client_log",
    "enhance",
    "notifications",
    "photos",
    "places",
    "reviews",
    "users",
]
