"""Canonical enumerations and label tables shared by every module."""

from __future__ import annotations

from enum import Enum
from typing import NamedTuple


class Category(str, Enum):
    PARRILLAS = "PARRILLAS"
    CAFE_Y_DELI = "CAFE_Y_DELI"
    BODEGONES = "BODEGONES"
    RESTAURANTES = "RESTAURANTES"
    HAMBURGUESERIAS = "HAMBURGUESERIAS"
    PIZZERIAS = "PIZZERIAS"
    PASTAS = "PASTAS"
    CARRITOS = "CARRITOS"
    BARES = "BARES"
    HELADERIAS = "HELADERIAS"


class CategoryInfo(NamedTuple):
    label: str
    singular: str
    color: str


CATEGORY_INFO: dict[Category, CategoryInfo] = {
    Category.PARRILLAS: CategoryInfo("Parrillas", "Parrilla", "#E53935"),
    Category.CAFE_Y_DELI: CategoryInfo("Café y Deli", "Café y Deli", "#FE1B08"),
    Category.BODEGONES: CategoryInfo("Bodegones", "Bodegón", "#0D83FE"),
    Category.RESTAURANTES: CategoryInfo("Restaurantes", "Restaurante", "#FEEFCE"),
    Category.HAMBURGUESERIAS: CategoryInfo("Hamburgueserías", "Hamburguesería", "#151515"),
    Category.PIZZERIAS: CategoryInfo("Pizzerías", "Pizzería", "#FFD84D"),
    Category.PASTAS: CategoryInfo("Pastas", "Pastas", "#FF5A36"),
    Category.CARRITOS: CategoryInfo("Carritos", "Carrito", "#559DFF"),
    Category.BARES: CategoryInfo("Bares", "Bar", "#FFF5E1"),
    Category.HELADERIAS: CategoryInfo("Heladerías", "Heladería", "#2A2A2A"),
}


class PriceRange(str, Enum):
    UNDER_10000 = "under_10000"
    FROM_10000_TO_15000 = "10000_15000"
    FROM_15000_TO_20000 = "15000_20000"
    FROM_20000_TO_30000 = "20000_30000"
    FROM_30000_TO_50000 = "30000_50000"
    FROM_50000_TO_80000 = "50000_80000"
    OVER_80000 = "over_80000"


PRICE_RANGE_LABELS: dict[PriceRange, str] = {
    PriceRange.UNDER_10000: "Menos de $10.000",
    PriceRange.FROM_10000_TO_15000: "$10.000 - $15.000",
    PriceRange.FROM_15000_TO_20000: "$15.000 - $20.000",
    PriceRange.FROM_20000_TO_30000: "$20.000 - $30.000",
    PriceRange.FROM_30000_TO_50000: "$30.000 - $50.000",
    PriceRange.FROM_50000_TO_80000: "$50.000 - $80.000",
    PriceRange.OVER_80000: "Más de $80.000",
}


# Sub-ratings collected by the review form, with their display labels.
RATING_FIELDS: dict[str, str] = {
    "food_taste": "Sabor",
    "presentation": "Presentación",
    "portion_size": "Porción",
    "music_acoustics": "Música",
    "ambiance": "Ambiente",
    "furniture_comfort": "Comodidad",
    "service": "Servicio",
}
LEGACY_RATING_FIELDS = ("drinks_variety", "cleanliness")

# (upper bound inclusive, label)
_RATING_LABELS = (
    (2, "Muy malo"),
    (4, "Malo"),
    (6, "Regular"),
    (8, "Bueno"),
    (9, "Muy bueno"),
)


def rating_label(rating: float) -> str:
    for upper, label in _RATING_LABELS:
        if rating <= upper:
            return label
    return "Excelente"


def category_label(category: Category | str | None) -> str | None:
    if category is None:
        return None
    try:
        return CATEGORY_INFO[Category(category)].label
    except ValueError:
        return str(category)


def price_label(price_range: PriceRange | str | None) -> str | None:
    if price_range is None:
        return None
    try:
        return PRICE_RANGE_LABELS[PriceRange(price_range)]
    except ValueError:
        return str(price_range)


# =============================================================================
# Gamification reference data
# =============================================================================


class AchievementTier(NamedTuple):
    level: int
    title: str
    required_reviews: int
    points_reward: int
    icon: str


ACHIEVEMENT_TIERS: tuple[AchievementTier, ...] = (
    AchievementTier(1, "Primer bocado", 1, 100, "🥄"),
    AchievementTier(2, "Habitué", 5, 250, "🍽️"),
    AchievementTier(3, "Conocedor", 10, 500, "🏅"),
    AchievementTier(4, "Experto", 25, 1000, "🏆"),
    AchievementTier(5, "Leyenda", 50, 2000, "👑"),
)


class LevelTier(NamedTuple):
    level_number: int
    name: str
    color: str
    icon: str
    min_points: int
    max_points: int | None


USER_LEVELS: tuple[LevelTier, ...] = (
    LevelTier(1, "Novato", "#9CA3AF", "🌱", 0, 499),
    LevelTier(2, "Explorador", "#3B82F6", "🧭", 500, 1499),
    LevelTier(3, "Conocedor", "#10B981", "🍷", 1500, 3999),
    LevelTier(4, "Experto", "#F59E0B", "⭐", 4000, 9999),
    LevelTier(5, "Leyenda", "#EF4444", "👑", 10000, None),
)
