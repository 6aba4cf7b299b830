"""Daily, weekly and monthly nutrition summaries."""

import calendar
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Protocol
from uuid import UUID

from pydantic import TypeAdapter

from calorie_tracker.domain.reports import DailyNutrition, DailyTotals, PeriodNutrition
from calorie_tracker.errors import ValidationFailure
from calorie_tracker.services import cache_keys
from calorie_tracker.services.cache import CacheGateway

MAX_RANGE_DAYS = 366
DECEMBER = 12

_DAILY_ADAPTER = TypeAdapter(DailyNutrition)
_PERIOD_ADAPTER = TypeAdapter(PeriodNutrition)


class NutritionRepository(Protocol):
    """Read-only queries over persisted meal totals."""

    async def sum_meals_by_day(
        self, user_id: UUID, start: date, end: date
    ) -> list[DailyTotals]:
        """Return summed meal totals for each day with meals in the inclusive range."""

    async def get_daily_calorie_goal(self, user_id: UUID) -> int | None:
        """Return the user's configured daily calorie goal."""


@dataclass
class NutritionReportService:
    """Cache-aside reporting over the denormalized meal totals."""

    repository: NutritionRepository
    cache: CacheGateway

    async def get_daily(self, user_id: UUID, day: date) -> DailyNutrition:
        """Return one day's totals; a day without meals is all zeros."""
        cache_key = cache_keys.daily_nutrition_key(user_id, day)
        cached = await self.cache.get_typed(cache_key, _DAILY_ADAPTER)
        if cached is not None:
            return cached

        rows = await self.repository.sum_meals_by_day(user_id, day, day)
        totals = rows[0] if rows else _empty_day(day)
        summary = DailyNutrition(
            day=day,
            total_calories=totals.calories,
            total_protein_g=totals.protein_g,
            total_carbs_g=totals.carbs_g,
            total_fat_g=totals.fat_g,
            meal_count=totals.meal_count,
            daily_goal=await self.repository.get_daily_calorie_goal(user_id),
        )
        await self.cache.set(
            cache_key, _DAILY_ADAPTER.dump_python(summary, mode="json")
        )
        return summary

    async def get_weekly(
        self, user_id: UUID, start: date, end: date
    ) -> PeriodNutrition:
        """Return a per-day series over an inclusive date range."""
        _validate_range(start, end)
        cache_key = cache_keys.weekly_nutrition_key(user_id, start, end)
        return await self._get_period(cache_key, user_id, start, end)

    async def get_monthly(
        self, user_id: UUID, month: int, year: int
    ) -> PeriodNutrition:
        """Return a per-day series for a calendar month."""
        if not 1 <= month <= DECEMBER:
            raise ValidationFailure(f"Month must be between 1 and 12, got {month}")
        if not 1 <= year <= 9999:
            raise ValidationFailure(f"Invalid year {year}")
        start = date(year, month, 1)
        end = date(year, month, calendar.monthrange(year, month)[1])
        cache_key = cache_keys.monthly_nutrition_key(user_id, year, month)
        return await self._get_period(cache_key, user_id, start, end)

    async def _get_period(
        self, cache_key: str, user_id: UUID, start: date, end: date
    ) -> PeriodNutrition:
        cached = await self.cache.get_typed(cache_key, _PERIOD_ADAPTER)
        if cached is not None:
            return cached

        rows = await self.repository.sum_meals_by_day(user_id, start, end)
        summary = _aggregate_period(
            start,
            end,
            rows,
            await self.repository.get_daily_calorie_goal(user_id),
        )
        await self.cache.set(
            cache_key, _PERIOD_ADAPTER.dump_python(summary, mode="json")
        )
        return summary


def _validate_range(start: date, end: date) -> None:
    if start > end:
        raise ValidationFailure("start_date must not be after end_date")
    if (end - start).days + 1 > MAX_RANGE_DAYS:
        raise ValidationFailure(f"Date range may span at most {MAX_RANGE_DAYS} days")


def _empty_day(day: date) -> DailyTotals:
    return DailyTotals(
        day=day, calories=0.0, protein_g=0.0, carbs_g=0.0, fat_g=0.0, meal_count=0
    )


def _aggregate_period(
    start: date, end: date, rows: list[DailyTotals], daily_goal: int | None
) -> PeriodNutrition:
    by_day = {row.day: row for row in rows}
    days = (end - start).days + 1
    daily = []
    for offset in range(days):
        day = start + timedelta(days=offset)
        daily.append(by_day.get(day) or _empty_day(day))

    total_calories = sum(entry.calories for entry in daily)
    return PeriodNutrition(
        start_date=start,
        end_date=end,
        daily=daily,
        total_calories=total_calories,
        total_protein_g=sum(entry.protein_g for entry in daily),
        total_carbs_g=sum(entry.carbs_g for entry in daily),
        total_fat_g=sum(entry.fat_g for entry in daily),
        avg_calories=total_calories / max(days, 1),
        daily_goal=daily_goal,
    )
