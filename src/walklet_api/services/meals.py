"""Meal photo analysis service."""

from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import Protocol
from uuid import UUID
from zoneinfo import ZoneInfo

from walklet_api.domain.errors import (
    ConflictError,
    LimitExceededError,
    ValidationError,
)
from walklet_api.domain.meals import MealAnalysis, MealType
from walklet_api.domain.nutrition import MacroProfile
from walklet_api.services.locks import KeyedLocks
from walklet_api.services.nutrition import NutritionService

MAX_ANALYSES_PER_DAY = 3

# (upper bound in bytes, food name, portion grams). Placeholder for a real
# recognition model: the photo's size alone picks the meal.
_SIZE_BUCKETS: list[tuple[int, str, float]] = [
    (50_000, "apple", 150),
    (150_000, "salad", 200),
    (400_000, "oatmeal", 250),
    (800_000, "chicken breast", 180),
    (1_500_000, "rice", 250),
    (3_000_000, "pasta", 300),
]
_LARGEST_BUCKET = ("pizza", 350.0)


def estimate_meal(size_bytes: int) -> tuple[str, float]:
    """Return (food name, grams) guessed from an image's size."""
    for upper_bound, food_name, grams in _SIZE_BUCKETS:
        if size_bytes < upper_bound:
            return food_name, grams
    return _LARGEST_BUCKET


class MealRepository(Protocol):
    """Persistence interface for meal analyses."""

    def create_analysis(  # noqa: PLR0913
        self,
        user_id: UUID,
        meal_type: MealType | None,
        food_name: str,
        grams: float,
        macros: MacroProfile,
        nutrition_source: str,
        created_at: datetime,
    ) -> MealAnalysis:
        """Persist an analysis and return it."""

    def list_between(
        self, user_id: UUID, start: datetime, end: datetime
    ) -> list[MealAnalysis]:
        """Return analyses created within a time range."""

    def list_recent(self, user_id: UUID, limit: int) -> list[MealAnalysis]:
        """Return recent analyses, newest first."""


@dataclass
class MealService:
    """Scores meal photos and enforces per-day submission limits."""

    nutrition_service: NutritionService
    repository: MealRepository
    timezone_name: str = "UTC"
    _locks: KeyedLocks = field(default_factory=KeyedLocks, init=False, repr=False)

    async def analyze(
        self,
        user_id: UUID,
        image_bytes: bytes,
        meal_type: MealType | None = None,
        now: datetime | None = None,
    ) -> MealAnalysis:
        """Estimate nutrition for a meal photo and record the result."""
        if not image_bytes:
            raise ValidationError("Uploaded file is empty")
        food_name, grams = estimate_meal(len(image_bytes))
        # Limit check and insert run under one per-user lock so concurrent
        # uploads cannot all pass the check before any row exists.
        async with self._locks.hold(user_id):
            created_at = now or datetime.now(tz=UTC)
            self._check_limits(user_id, meal_type, created_at)
            lookup = await self.nutrition_service.lookup(food_name)
            macros = lookup.macros.scaled(grams / 100)
            return self.repository.create_analysis(
                user_id=user_id,
                meal_type=meal_type,
                food_name=food_name,
                grams=grams,
                macros=macros,
                nutrition_source=lookup.source.value,
                created_at=created_at,
            )

    def list_recent(self, user_id: UUID, limit: int = 20) -> list[MealAnalysis]:
        return self.repository.list_recent(user_id, limit)

    def _check_limits(
        self, user_id: UUID, meal_type: MealType | None, at: datetime
    ) -> None:
        tz = ZoneInfo(self.timezone_name)
        start = at.astimezone(tz).replace(hour=0, minute=0, second=0, microsecond=0)
        end = start + timedelta(days=1)
        todays = self.repository.list_between(
            user_id, start.astimezone(UTC), end.astimezone(UTC)
        )
        if len(todays) >= MAX_ANALYSES_PER_DAY:
            raise LimitExceededError(
                f"Daily limit of {MAX_ANALYSES_PER_DAY} meal analyses reached"
            )
        if meal_type is not None and any(
            analysis.meal_type == meal_type for analysis in todays
        ):
            raise ConflictError(f"A {meal_type.value} analysis already exists today")


def serialize_meal(analysis: MealAnalysis) -> dict[str, object]:
    return {
        "id": str(analysis.id),
        "meal_type": analysis.meal_type.value if analysis.meal_type else None,
        "food_name": analysis.food_name,
        "grams": analysis.grams,
        "calories": analysis.calories,
        "protein_g": analysis.protein_g,
        "carbs_g": analysis.carbs_g,
        "fat_g": analysis.fat_g,
        "nutrition_source": analysis.nutrition_source,
        "created_at": analysis.created_at.isoformat(),
    }
