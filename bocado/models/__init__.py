"""Import every model so Base.metadata knows all tables."""

from bocado.models.user import User  # noqa: F401
from bocado.models.place import Place  # noqa: F401
from bocado.models.review import DetailedReview, ReviewPhoto  # noqa: F401
from bocado.models.achievement import Achievement, UserAchievement  # noqa: F401
from bocado.models.notification import Notification  # noqa: F401
from bocado.models.points import PointsHistory  # noqa: F401
