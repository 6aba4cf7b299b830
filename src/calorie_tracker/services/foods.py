"""Services for the food catalog."""

import logging
from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from pydantic import TypeAdapter

from calorie_tracker.domain.foods import Food, FoodPage, FoodQuery
from calorie_tracker.errors import NotFoundError, ValidationFailure
from calorie_tracker.services import cache_keys
from calorie_tracker.services.cache import CacheGateway
from calorie_tracker.services.paging import total_pages, validate_page

_FOOD_ADAPTER = TypeAdapter(Food)
_PAGE_ADAPTER = TypeAdapter(FoodPage)

EDITABLE_FIELDS = frozenset(
    {
        "name",
        "calories",
        "protein_g",
        "carbs_g",
        "fat_g",
        "fiber_g",
        "sugar_g",
        "sodium_mg",
        "serving_size",
        "serving_unit",
        "category",
        "description",
        "locale_id",
        "external_id",
    }
)
_NUTRIENT_FIELDS = ("calories", "protein_g", "carbs_g", "fat_g")

_logger = logging.getLogger(__name__)


class FoodRepository(Protocol):
    """Persistence interface for catalog foods."""

    async def get_food(self, food_id: UUID) -> Food | None:
        """Return a food by id, if present."""

    async def find_by_name(self, user_id: UUID, name: str) -> Food | None:
        """Return a food with this exact name visible to the user."""

    async def find_by_external_id(
        self, user_id: UUID, external_id: str
    ) -> Food | None:
        """Return a visible food imported from an external source."""

    async def search_foods(
        self, user_id: UUID, query: FoodQuery
    ) -> tuple[list[Food], int]:
        """Return one page of visible foods and the total match count."""

    async def create_food(self, user_id: UUID, payload: dict[str, object]) -> Food:
        """Create a food owned by the user and return it."""

    async def update_food(self, food_id: UUID, payload: dict[str, object]) -> Food:
        """Update a food and return it."""

    async def delete_food(self, food_id: UUID) -> None:
        """Delete a food."""

    async def is_referenced(self, food_id: UUID) -> bool:
        """Return True when any meal line points at the food."""


@dataclass
class FoodCatalogService:
    """Application service for catalog lookups and user-owned foods."""

    repository: FoodRepository
    cache: CacheGateway

    async def get_food(self, food_id: UUID, user_id: UUID | None = None) -> Food:
        """Return a food visible to the user, or raise NotFoundError."""
        cache_key = cache_keys.food_key(food_id, user_id)
        cached = await self.cache.get_typed(cache_key, _FOOD_ADAPTER)
        if cached is not None:
            return cached

        food = await self.repository.get_food(food_id)
        if food is None or not food.is_visible_to(user_id):
            raise NotFoundError(f"Food {food_id} not found")
        await self.cache.set(cache_key, _FOOD_ADAPTER.dump_python(food, mode="json"))
        return food

    async def search(self, user_id: UUID, query: FoodQuery) -> FoodPage:
        """Search foods visible to the user."""
        validate_page(query.page, query.limit)
        cache_key = cache_keys.user_foods_key(user_id, query)
        cached = await self.cache.get_typed(cache_key, _PAGE_ADAPTER)
        if cached is not None:
            return cached

        foods, total = await self.repository.search_foods(user_id, query)
        page = FoodPage(
            foods=foods,
            total_count=total,
            page=query.page,
            total_pages=total_pages(total, query.limit),
        )
        await self.cache.set(cache_key, _PAGE_ADAPTER.dump_python(page, mode="json"))
        return page

    async def create_food(self, user_id: UUID, payload: dict[str, object]) -> Food:
        """Create a food, returning an existing visible food with the same name."""
        _validate_payload(payload)
        name = str(payload.get("name") or "").strip()
        if not name:
            raise ValidationFailure("Food name is required")
        if payload.get("calories") is None:
            raise ValidationFailure("Food calories are required")
        existing = await self.repository.find_by_name(user_id, name)
        if existing is not None:
            return existing
        food = await self.repository.create_food(user_id, {**payload, "name": name})
        await self.cache.delete_by_pattern(cache_keys.user_foods_pattern(user_id))
        _logger.info("Created food %s for user %s", food.id, user_id)
        return food

    async def find_imported(self, user_id: UUID, external_id: str) -> Food | None:
        """Return a visible food previously imported with this external id."""
        return await self.repository.find_by_external_id(user_id, external_id)

    async def update_food(
        self, food_id: UUID, user_id: UUID, payload: dict[str, object]
    ) -> Food:
        """Update a food owned by the user."""
        _validate_payload(payload)
        await self._get_owned(food_id, user_id)
        food = await self.repository.update_food(food_id, payload)
        await self._invalidate(food_id, user_id)
        return food

    async def delete_food(self, food_id: UUID, user_id: UUID) -> bool:
        """Delete a food owned by the user that no meal references."""
        await self._get_owned(food_id, user_id)
        if await self.repository.is_referenced(food_id):
            raise ValidationFailure(f"Food {food_id} is used by logged meals")
        await self.repository.delete_food(food_id)
        await self._invalidate(food_id, user_id)
        return True

    async def _get_owned(self, food_id: UUID, user_id: UUID) -> Food:
        food = await self.repository.get_food(food_id)
        if food is None or food.user_id != user_id:
            raise NotFoundError(f"Food {food_id} not found")
        return food

    async def _invalidate(self, food_id: UUID, user_id: UUID) -> None:
        await self.cache.delete_by_pattern(cache_keys.food_pattern(food_id))
        await self.cache.delete_by_pattern(cache_keys.user_foods_pattern(user_id))


def _validate_payload(payload: dict[str, object]) -> None:
    unknown = set(payload) - EDITABLE_FIELDS
    if unknown:
        raise ValidationFailure(f"Unknown food fields: {sorted(unknown)}")
    for field in _NUTRIENT_FIELDS:
        value = payload.get(field)
        if value is not None and float(value) < 0:
            raise ValidationFailure(f"{field} must not be negative")
