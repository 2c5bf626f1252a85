"""Nutrition domain models."""

from dataclasses import dataclass
from enum import Enum


@dataclass(frozen=True)
class MacroProfile:
    """Macronutrient profile for a food item."""

    calories: float
    protein_g: float
    carbs_g: float
    fat_g: float

    def scaled(self, factor: float) -> "MacroProfile":
        """Return the profile multiplied by a factor, rounded to 0.1."""
        return MacroProfile(
            calories=round(self.calories * factor, 1),
            protein_g=round(self.protein_g * factor, 1),
            carbs_g=round(self.carbs_g * factor, 1),
            fat_g=round(self.fat_g * factor, 1),
        )


class NutritionSource(str, Enum):
    """Where a nutrition lookup result came from."""

    FDC = "fdc"
    FALLBACK = "fallback"


@dataclass(frozen=True)
class NutritionLookup:
    """Result of a nutrition lookup for a normalized food name.

    ``fallback_key`` and ``error`` are only set when the static table was used.
    """

    query: str
    macros: MacroProfile
    source: NutritionSource
    description: str | None = None
    fallback_key: str | None = None
    error: str | None = None

    @property
    def used_fallback(self) -> bool:
        return self.source is NutritionSource.FALLBACK


DEFAULT_FALLBACK_KEY = "default"

# Values per 100 g.
FALLBACK_NUTRITION: dict[str, MacroProfile] = {
    "apple": MacroProfile(calories=52, protein_g=0.3, carbs_g=14, fat_g=0.2),
    "banana": MacroProfile(calories=89, protein_g=1.1, carbs_g=23, fat_g=0.3),
    "salad": MacroProfile(calories=20, protein_g=1.5, carbs_g=3.6, fat_g=0.2),
    "oatmeal": MacroProfile(calories=71, protein_g=2.5, carbs_g=12, fat_g=1.5),
    "rice": MacroProfile(calories=130, protein_g=2.7, carbs_g=28, fat_g=0.3),
    "pasta": MacroProfile(calories=131, protein_g=5, carbs_g=25, fat_g=1.1),
    "chicken breast": MacroProfile(calories=165, protein_g=31, carbs_g=0, fat_g=3.6),
    "salmon": MacroProfile(calories=208, protein_g=20, carbs_g=0, fat_g=13),
    "pizza": MacroProfile(calories=266, protein_g=11, carbs_g=33, fat_g=10),
    DEFAULT_FALLBACK_KEY: MacroProfile(calories=150, protein_g=6, carbs_g=20, fat_g=5),
}
