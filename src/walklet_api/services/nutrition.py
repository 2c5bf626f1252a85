"""Nutrition lookups against USDA FDC with a static fallback table."""

import logging
from dataclasses import dataclass

from walklet_api.adapters.fdc_client import FdcClient
from walklet_api.domain.nutrition import (
    DEFAULT_FALLBACK_KEY,
    FALLBACK_NUTRITION,
    MacroProfile,
    NutritionLookup,
    NutritionSource,
)
from walklet_api.services.cache import Cache

_NUTRIENT_IDS = {
    "calories": 1008,
    "protein": 1003,
    "fat": 1004,
    "carbs": 1005,
}

_logger = logging.getLogger(__name__)


def normalize_food_name(name: str) -> str:
    """Lower-case and collapse whitespace in a food name."""
    return " ".join(name.strip().lower().split())


@dataclass
class NutritionService:
    """Service for per-100 g nutrition lookups with memoization."""

    fdc_client: FdcClient
    cache: Cache

    async def lookup(self, name: str) -> NutritionLookup:
        """Return macros for a food, falling back to the static table."""
        query = normalize_food_name(name)
        cache_key = f"nutrition:{query}"
        cached = self.cache.get(cache_key)
        if isinstance(cached, NutritionLookup):
            return cached

        try:
            result = await self._search_fdc(query)
        except Exception as exc:
            # Not cached: the next lookup retries FDC.
            _logger.warning(
                "Nutrition lookup failed for %r, using fallback: %s", query, exc
            )
            return _fallback(query, error=f"{type(exc).__name__}: {exc}")
        if result is None:
            _logger.warning("No FDC match for %r, using fallback", query)
            result = _fallback(query, error="no match")

        self.cache.set(cache_key, result)
        return result

    async def _search_fdc(self, query: str) -> NutritionLookup | None:
        payload = await self.fdc_client.search_foods(query, page_size=1)
        foods = payload.get("foods") or []
        if not foods:
            return None
        food = foods[0]
        return NutritionLookup(
            query=query,
            macros=_extract_macros(food.get("foodNutrients", [])),
            source=NutritionSource.FDC,
            description=food.get("description"),
        )


def _fallback(query: str, error: str) -> NutritionLookup:
    key = query if query in FALLBACK_NUTRITION else DEFAULT_FALLBACK_KEY
    return NutritionLookup(
        query=query,
        macros=FALLBACK_NUTRITION[key],
        source=NutritionSource.FALLBACK,
        fallback_key=key,
        error=error,
    )


def _extract_macros(food_nutrients: list[dict[str, object]]) -> MacroProfile:
    """Extract calories, protein, fat, carbs from FDC nutrients."""
    values: dict[str, float] = {
        "calories": 0.0,
        "protein": 0.0,
        "fat": 0.0,
        "carbs": 0.0,
    }
    for nutrient in food_nutrients:
        nutrient_info = nutrient.get("nutrient") or {}
        nutrient_id = nutrient_info.get("id") or nutrient.get("nutrientId")
        # Search results carry "value"; food detail payloads carry "amount".
        amount = nutrient.get("value", nutrient.get("amount"))
        if amount is None:
            continue
        for key, wanted_id in _NUTRIENT_IDS.items():
            if nutrient_id == wanted_id:
                values[key] = float(amount)

    return MacroProfile(
        calories=values["calories"],
        protein_g=values["protein"],
        carbs_g=values["carbs"],
        fat_g=values["fat"],
    )
