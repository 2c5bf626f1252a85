"""Domain models for meal photo analysis."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from uuid import UUID


class MealType(str, Enum):
    """Meal slot a photo was submitted for."""

    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    DINNER = "dinner"


@dataclass(frozen=True)
class MealAnalysis:
    """A scored meal-photo submission."""

    id: UUID
    user_id: UUID
    meal_type: MealType | None
    food_name: str
    grams: float
    calories: float
    protein_g: float
    carbs_g: float
    fat_g: float
    nutrition_source: str
    created_at: datetime
