"""
Error taxonomy for Bocado.

Every error carries the HTTP status it maps to and a short machine code; the
API layer turns them into `{"error": code, "detail": message}` responses.
"""

from typing import Any, Optional


class BocadoError(Exception):
    """Base exception for all Bocado errors."""

    status_code: int = 500
    code: str = "internal_error"

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


# =============================================================================
# Request / identity errors
# =============================================================================


class Unauthorized(BocadoError):
    """No authenticated user, or the auth provider could not be reached."""

    status_code = 401
    code = "unauthorized"


class Forbidden(BocadoError):
    status_code = 403
    code = "forbidden"


class NotFound(BocadoError):
    status_code = 404
    code = "not_found"


# =============================================================================
# Review submission errors
# =============================================================================


class IncompletePlaceData(BocadoError):
    """The place candidate has no external identifier (or no name/address)."""

    status_code = 400
    code = "incomplete_place_data"


class InvalidReviewData(BocadoError):
    status_code = 422
    code = "invalid_review_data"


class DuplicateReview(BocadoError):
    """The user already reviewed this place."""

    status_code = 409
    code = "duplicate_review"

    def __init__(self, user_id: str, place_id: str):
        self.user_id = user_id
        self.place_id = place_id
        super().__init__(
            "You already have a review for this place. Only one review per place is allowed.",
            {"user_id": user_id, "place_id": place_id},
        )


class PlaceResolutionFailed(BocadoError):
    status_code = 502
    code = "place_resolution_failed"


class ReviewInsertFailed(BocadoError):
    status_code = 500
    code = "review_insert_failed"


class AchievementEvaluationFailed(BocadoError):
    """Raised after the review is committed; callers log it and move on."""

    code = "achievement_evaluation_failed"


# =============================================================================
# External collaborators
# =============================================================================


class PhotoUploadFailed(BocadoError):
    """A single photo could not be stored; reported per file."""

    status_code = 502
    code = "photo_upload_failed"

    def __init__(self, filename: str, message: str):
        self.filename = filename
        super().__init__(f"{filename}: {message}", {"filename": filename})


class ExternalApiUnavailable(BocadoError):
    """Mapping or LLM API failed, timed out or is not configured."""

    status_code = 502
    code = "external_api_unavailable"

    def __init__(self, service: str, message: str, timed_out: bool = False):
        self.service = service
        self.timed_out = timed_out
        if timed_out:
            self.status_code = 504
        super().__init__(f"[{service}] {message}", {"service": service})
