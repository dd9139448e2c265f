"""Expose schemas for easier import."""

from bocado.schemas.place import PlaceCandidate, PlaceOut, SelectedPlace  # noqa: F401
from bocado.schemas.review import (  # noqa: F401
    PointsBreakdownOut,
    ReviewDraft,
    ReviewOut,
    SubmissionResponse,
    UnlockedAchievement,
)
from bocado.schemas.achievement import AchievementProgress, AchievementStatistics  # noqa: F401
from bocado.schemas.notification import NotificationOut, UnreadCount  # noqa: F401
from bocado.schemas.user import PointsHistoryOut, UserLevelOut, UserProfile  # noqa: F401
