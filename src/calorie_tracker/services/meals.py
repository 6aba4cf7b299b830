"""Meal logging service.

A meal's ``total_*`` columns are denormalized sums of its food lines. Every
operation that touches lines re-sums the lines that remain in the store
instead of adding or subtracting deltas, so rounding error never accumulates
across edits.
"""

import logging
from contextlib import AbstractAsyncContextManager
from dataclasses import dataclass, replace
from datetime import date
from typing import Protocol
from uuid import UUID

from pydantic import TypeAdapter

from calorie_tracker.domain.foods import Food
from calorie_tracker.domain.meals import (
    CLEARABLE_FIELDS,
    FoodLineInput,
    FoodLineSnapshot,
    Meal,
    MealFields,
    MealFoodLine,
    MealInput,
    MealPage,
    MealQuery,
    MealUpdate,
    parse_meal_type,
)
from calorie_tracker.domain.nutrition import ZERO_MACROS, MacroProfile
from calorie_tracker.errors import NotFoundError, ValidationFailure
from calorie_tracker.services import cache_keys
from calorie_tracker.services.cache import CacheGateway
from calorie_tracker.services.invalidation import CacheInvalidationPolicy
from calorie_tracker.services.paging import total_pages, validate_page

_MEAL_ADAPTER = TypeAdapter(Meal)
_MEAL_LIST_ADAPTER = TypeAdapter(list[Meal])
_MEAL_PAGE_ADAPTER = TypeAdapter(MealPage)

_logger = logging.getLogger(__name__)


class MealTransaction(Protocol):
    """Store operations available inside one meal transaction."""

    async def get_food(self, food_id: UUID) -> Food | None:
        """Return a catalog food by id."""

    async def get_meal(
        self, meal_id: UUID, user_id: UUID, *, lock: bool = False
    ) -> Meal | None:
        """Return a meal owned by the user, optionally locking its row."""

    async def insert_meal(
        self, user_id: UUID, fields: MealFields, totals: MacroProfile
    ) -> UUID:
        """Insert a meal row and return its id."""

    async def update_meal(
        self, meal_id: UUID, fields: MealFields, totals: MacroProfile | None
    ) -> None:
        """Overwrite a meal's fields, and its totals when given."""

    async def insert_food_lines(
        self, meal_id: UUID, lines: list[FoodLineSnapshot]
    ) -> None:
        """Insert food lines for a meal."""

    async def list_food_lines(self, meal_id: UUID) -> list[MealFoodLine]:
        """Return the food lines of a meal."""

    async def delete_food_lines(
        self, meal_id: UUID, food_id: UUID | None = None
    ) -> int:
        """Delete a meal's lines, or only those for one food; return the count."""

    async def delete_meal(self, meal_id: UUID) -> bool:
        """Delete a meal row; its lines must already be gone."""

    async def list_meals(
        self, user_id: UUID, query: MealQuery
    ) -> tuple[list[Meal], int]:
        """Return one page of meals, newest first, and the total count."""

    async def list_meals_by_date(self, user_id: UUID, day: date) -> list[Meal]:
        """Return all meals for a calendar day ordered by meal type."""


class MealStore(Protocol):
    """Opens all-or-nothing transactions over meals and their lines."""

    def transaction(self) -> AbstractAsyncContextManager[MealTransaction]:
        """Begin a transaction committed on exit and rolled back on error."""


@dataclass
class MealService:
    """Service that computes meal totals, persists meals and drops stale caches."""

    store: MealStore
    cache: CacheGateway
    invalidation: CacheInvalidationPolicy

    async def create_meal(self, user_id: UUID, meal: MealInput) -> Meal:
        """Log a meal with its food lines in one transaction."""
        fields = MealFields(
            meal_type=parse_meal_type(meal.meal_type),
            meal_date=meal.meal_date,
            meal_time=meal.meal_time,
            name=meal.name,
            notes=meal.notes,
        )
        _validate_lines(meal.foods)
        async with self.store.transaction() as tx:
            snapshots, totals = await _build_snapshots(tx, user_id, meal.foods)
            meal_id = await tx.insert_meal(user_id, fields, totals)
            await tx.insert_food_lines(meal_id, snapshots)
            created = await _require_meal(tx, meal_id, user_id)

        await self.invalidation.meal_created(user_id, created.meal_date)
        _logger.info(
            "Created meal %s for user %s (%.1f kcal)",
            created.id,
            user_id,
            created.total_calories,
        )
        return created

    async def update_meal(
        self, meal_id: UUID, user_id: UUID, update: MealUpdate
    ) -> Meal:
        """Patch a meal; replace its lines and totals when foods are given."""
        if update.foods is not None:
            _validate_lines(update.foods)
        async with self.store.transaction() as tx:
            existing = await _require_meal(tx, meal_id, user_id, lock=True)
            fields = _merge_fields(existing.fields, update)
            if update.foods is None:
                await tx.update_meal(meal_id, fields, None)
            else:
                snapshots, totals = await _build_snapshots(tx, user_id, update.foods)
                await tx.delete_food_lines(meal_id)
                await tx.insert_food_lines(meal_id, snapshots)
                await tx.update_meal(meal_id, fields, totals)
            updated = await _require_meal(tx, meal_id, user_id)

        await self.invalidation.meal_changed(
            user_id, meal_id, existing.meal_date, updated.meal_date
        )
        _logger.info("Updated meal %s for user %s", meal_id, user_id)
        return updated

    async def delete_meal(self, meal_id: UUID, user_id: UUID) -> bool:
        """Delete a meal and its lines; return False when it doesn't exist."""
        async with self.store.transaction() as tx:
            existing = await tx.get_meal(meal_id, user_id, lock=True)
            if existing is None:
                return False
            await tx.delete_food_lines(meal_id)
            await tx.delete_meal(meal_id)

        await self.invalidation.meal_changed(user_id, meal_id, existing.meal_date)
        _logger.info("Deleted meal %s for user %s", meal_id, user_id)
        return True

    async def remove_food_line(
        self, meal_id: UUID, food_id: UUID, user_id: UUID
    ) -> Meal:
        """Remove a food from a meal and re-sum the remaining lines."""
        async with self.store.transaction() as tx:
            existing = await _require_meal(tx, meal_id, user_id, lock=True)
            removed = await tx.delete_food_lines(meal_id, food_id)
            if removed == 0:
                raise NotFoundError(f"Food {food_id} is not part of meal {meal_id}")
            remaining = await tx.list_food_lines(meal_id)
            await tx.update_meal(meal_id, existing.fields, _sum_totals(remaining))
            updated = await _require_meal(tx, meal_id, user_id)

        await self.invalidation.meal_changed(user_id, meal_id, existing.meal_date)
        return updated

    async def get_meal(self, meal_id: UUID, user_id: UUID) -> Meal:
        """Return a meal owned by the user."""
        cache_key = cache_keys.meal_key(meal_id, user_id)
        cached = await self.cache.get_typed(cache_key, _MEAL_ADAPTER)
        if cached is not None:
            return cached

        async with self.store.transaction() as tx:
            meal = await _require_meal(tx, meal_id, user_id)
        await self.cache.set(cache_key, _MEAL_ADAPTER.dump_python(meal, mode="json"))
        return meal

    async def list_meals(self, user_id: UUID, query: MealQuery) -> MealPage:
        """Return a page of the user's meals, newest first."""
        validate_page(query.page, query.limit)
        if (
            query.start_date is not None
            and query.end_date is not None
            and query.start_date > query.end_date
        ):
            raise ValidationFailure("start_date must not be after end_date")
        cache_key = cache_keys.user_meals_key(user_id, query)
        cached = await self.cache.get_typed(cache_key, _MEAL_PAGE_ADAPTER)
        if cached is not None:
            return cached

        async with self.store.transaction() as tx:
            meals, total = await tx.list_meals(user_id, query)
        page = MealPage(
            meals=meals,
            total_count=total,
            page=query.page,
            total_pages=total_pages(total, query.limit),
        )
        await self.cache.set(
            cache_key, _MEAL_PAGE_ADAPTER.dump_python(page, mode="json")
        )
        return page

    async def list_meals_by_date(self, user_id: UUID, day: date) -> list[Meal]:
        """Return the user's meals for one day."""
        cache_key = cache_keys.user_meals_by_date_key(user_id, day)
        cached = await self.cache.get_typed(cache_key, _MEAL_LIST_ADAPTER)
        if cached is not None:
            return cached

        async with self.store.transaction() as tx:
            meals = await tx.list_meals_by_date(user_id, day)
        await self.cache.set(
            cache_key, _MEAL_LIST_ADAPTER.dump_python(meals, mode="json")
        )
        return meals


async def _require_meal(
    tx: MealTransaction, meal_id: UUID, user_id: UUID, *, lock: bool = False
) -> Meal:
    meal = await tx.get_meal(meal_id, user_id, lock=lock)
    if meal is None:
        raise NotFoundError(f"Meal {meal_id} not found")
    return meal


async def _build_snapshots(
    tx: MealTransaction, user_id: UUID, lines: list[FoodLineInput]
) -> tuple[list[FoodLineSnapshot], MacroProfile]:
    snapshots: list[FoodLineSnapshot] = []
    foods: dict[UUID, Food] = {}
    for line in lines:
        food = foods.get(line.food_id)
        if food is None:
            food = await tx.get_food(line.food_id)
            if food is None or not food.is_visible_to(user_id):
                raise NotFoundError(f"Food {line.food_id} not found")
            foods[line.food_id] = food
        portion = _compute_portion_macros(food.macros, line.quantity)
        snapshots.append(
            FoodLineSnapshot(
                food_id=food.id,
                food_name=food.name,
                quantity=line.quantity,
                calories=portion.calories,
                protein_g=portion.protein_g,
                carbs_g=portion.carbs_g,
                fat_g=portion.fat_g,
            )
        )
    return snapshots, _sum_totals(snapshots)


def _compute_portion_macros(base: MacroProfile, quantity: float) -> MacroProfile:
    factor = quantity / 100.0
    return MacroProfile(
        calories=base.calories * factor,
        protein_g=base.protein_g * factor,
        carbs_g=base.carbs_g * factor,
        fat_g=base.fat_g * factor,
    )


def _sum_totals(lines: list[FoodLineSnapshot] | list[MealFoodLine]) -> MacroProfile:
    total = ZERO_MACROS
    for line in lines:
        total = MacroProfile(
            calories=total.calories + line.calories,
            protein_g=total.protein_g + line.protein_g,
            carbs_g=total.carbs_g + line.carbs_g,
            fat_g=total.fat_g + line.fat_g,
        )
    return total


def _validate_lines(lines: list[FoodLineInput]) -> None:
    for line in lines:
        if line.quantity < 0:
            raise ValidationFailure(
                f"Serving quantity for food {line.food_id} must not be negative"
            )


def _merge_fields(current: MealFields, update: MealUpdate) -> MealFields:
    unknown = update.cleared - CLEARABLE_FIELDS
    if unknown:
        raise ValidationFailure(f"Cannot clear fields: {sorted(unknown)}")
    merged = MealFields(
        meal_type=(
            parse_meal_type(update.meal_type)
            if update.meal_type is not None
            else current.meal_type
        ),
        meal_date=update.meal_date or current.meal_date,
        meal_time=update.meal_time or current.meal_time,
        name=update.name if update.name is not None else current.name,
        notes=update.notes if update.notes is not None else current.notes,
    )
    return replace(merged, **dict.fromkeys(update.cleared))
