"""Food import from USDA FoodData Central."""

import asyncio
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING
from uuid import UUID

import httpx
from pydantic import TypeAdapter

from calorie_tracker.adapters.fdc_client import FdcClient
from calorie_tracker.domain.foods import Food
from calorie_tracker.domain.nutrition import FdcFoodDetails, FoodSummary, MacroProfile
from calorie_tracker.services import cache_keys
from calorie_tracker.services.cache import CacheGateway
from calorie_tracker.services.foods import FoodCatalogService

_NUTRIENT_IDS = {
    "calories": 1008,
    "protein": 1003,
    "fat": 1004,
    "carbs": 1005,
    "fiber": 1079,
    "sugar": 2000,
    "sodium": 1093,
}

_SUMMARIES_ADAPTER = TypeAdapter(list[FoodSummary])
_DETAILS_ADAPTER = TypeAdapter(FdcFoodDetails)

_logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable


@dataclass
class FoodImportService:
    """Searches FDC and copies its foods into the catalog."""

    fdc_client: FdcClient
    cache: CacheGateway
    foods: FoodCatalogService
    search_ttl_seconds: int = 3600
    food_ttl_seconds: int = 86400
    retry_attempts: int = 1
    retry_delay_seconds: float = 0.3

    async def search(self, query: str, limit: int = 10) -> list[FoodSummary]:
        """Search FDC foods with caching."""
        cache_key = cache_keys.fdc_search_key(query, limit)
        cached = await self.cache.get_typed(cache_key, _SUMMARIES_ADAPTER)
        if cached is not None:
            return cached

        payload = await self._call_with_retry(
            lambda: self.fdc_client.search_foods(query, page_size=limit),
            action="search",
        )
        foods = [_parse_summary(food) for food in payload.get("foods", [])]
        await self.cache.set(
            cache_key,
            _SUMMARIES_ADAPTER.dump_python(foods, mode="json"),
            ttl_seconds=self.search_ttl_seconds,
        )
        return foods

    async def get_details(self, fdc_id: int) -> FdcFoodDetails:
        """Retrieve per-100 g nutrients for an FDC food."""
        cache_key = cache_keys.fdc_food_key(fdc_id)
        cached = await self.cache.get_typed(cache_key, _DETAILS_ADAPTER)
        if cached is not None:
            return cached

        payload = await self._call_with_retry(
            lambda: self.fdc_client.get_food(fdc_id),
            action=f"get_food:{fdc_id}",
        )
        nutrients = _extract_nutrients(payload.get("foodNutrients", []))
        details = FdcFoodDetails(
            summary=_parse_summary(payload),
            macros=MacroProfile(
                calories=nutrients["calories"] or 0.0,
                protein_g=nutrients["protein"] or 0.0,
                carbs_g=nutrients["carbs"] or 0.0,
                fat_g=nutrients["fat"] or 0.0,
            ),
            fiber_g=nutrients["fiber"],
            sugar_g=nutrients["sugar"],
            sodium_mg=nutrients["sodium"],
            serving_size=payload.get("servingSize"),
            serving_unit=payload.get("servingSizeUnit"),
        )
        await self.cache.set(
            cache_key,
            _DETAILS_ADAPTER.dump_python(details, mode="json"),
            ttl_seconds=self.food_ttl_seconds,
        )
        return details

    async def import_food(self, user_id: UUID, fdc_id: int) -> Food:
        """Create a catalog food from FDC, reusing a previous import."""
        external_id = str(fdc_id)
        existing = await self.foods.find_imported(user_id, external_id)
        if existing is not None:
            return existing

        details = await self.get_details(fdc_id)
        food = await self.foods.create_food(
            user_id,
            {
                "name": details.summary.description,
                "calories": details.macros.calories,
                "protein_g": details.macros.protein_g,
                "carbs_g": details.macros.carbs_g,
                "fat_g": details.macros.fat_g,
                "fiber_g": details.fiber_g,
                "sugar_g": details.sugar_g,
                "sodium_mg": details.sodium_mg,
                "serving_size": details.serving_size,
                "serving_unit": details.serving_unit,
                "description": details.summary.brand_owner,
                "external_id": external_id,
            },
        )
        _logger.info("Imported FDC food %s as %s", fdc_id, food.id)
        return food

    async def _call_with_retry(
        self, func: "Callable[[], Awaitable[dict[str, object]]]", *, action: str
    ) -> dict[str, object]:
        """Call an async function with a short retry."""
        attempt = 0
        while True:
            try:
                return await func()
            except httpx.HTTPError as exc:
                attempt += 1
                _logger.warning(
                    "FDC %s failed (attempt %s/%s, status=%s): %s",
                    action,
                    attempt,
                    self.retry_attempts + 1,
                    _status_code_from_exception(exc),
                    exc,
                )
                if attempt > self.retry_attempts:
                    raise
                await asyncio.sleep(self.retry_delay_seconds)


def _status_code_from_exception(exc: Exception) -> str:
    """Extract HTTP status code from an exception, if available."""
    response = getattr(exc, "response", None)
    status_code = getattr(response, "status_code", None)
    if isinstance(status_code, int):
        return str(status_code)
    return "n/a"


def _parse_summary(food: dict[str, object]) -> FoodSummary:
    return FoodSummary(
        fdc_id=food["fdcId"],
        description=food.get("description", ""),
        brand_owner=food.get("brandOwner"),
        brand_name=food.get("brandName"),
        data_type=food.get("dataType"),
    )


def _extract_nutrients(
    food_nutrients: list[dict[str, object]],
) -> dict[str, float | None]:
    """Map FDC nutrient entries to per-100 g values by nutrient id."""
    names_by_id = {nutrient_id: name for name, nutrient_id in _NUTRIENT_IDS.items()}
    values: dict[str, float | None] = dict.fromkeys(_NUTRIENT_IDS)
    for nutrient in food_nutrients:
        nutrient_info = nutrient.get("nutrient") or {}
        nutrient_id = nutrient_info.get("id") or nutrient.get("nutrientId")
        amount = nutrient.get("amount")
        if amount is None:
            amount = nutrient.get("value")
        name = names_by_id.get(nutrient_id)
        if name is not None and amount is not None:
            values[name] = float(amount)
    return values
