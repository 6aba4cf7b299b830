"""Rules coupling meal and profile writes to cache deletions.

Every method runs after the store transaction has committed. Failures are
absorbed by the cache gateway, so a missed deletion only means stale data
until the entry's TTL expires.
"""

import logging
from dataclasses import dataclass
from datetime import date
from uuid import UUID

from calorie_tracker.services import cache_keys
from calorie_tracker.services.cache import CacheGateway

_logger = logging.getLogger(__name__)


@dataclass
class CacheInvalidationPolicy:
    """Drops cache entries that depend on a user's meals or calorie goal."""

    cache: CacheGateway

    async def meal_created(self, user_id: UUID, meal_date: date) -> None:
        """Invalidate entries affected by a newly logged meal."""
        await self.cache.delete(cache_keys.daily_nutrition_key(user_id, meal_date))
        await self.cache.delete_by_pattern(cache_keys.user_meals_pattern(user_id))
        await self._drop_period_summaries(user_id, {meal_date})

    async def meal_changed(
        self,
        user_id: UUID,
        meal_id: UUID,
        old_date: date,
        new_date: date | None = None,
    ) -> None:
        """Invalidate entries after a meal update, deletion or line removal."""
        await self.cache.delete(cache_keys.meal_key(meal_id, user_id))
        await self.cache.delete_by_pattern(cache_keys.user_meals_pattern(user_id))
        await self.cache.delete(cache_keys.daily_nutrition_key(user_id, old_date))
        dates = {old_date}
        if new_date is not None and new_date != old_date:
            await self.cache.delete(cache_keys.daily_nutrition_key(user_id, new_date))
            dates.add(new_date)
        await self._drop_period_summaries(user_id, dates)

    async def goal_changed(self, user_id: UUID) -> None:
        """Invalidate every summary that embeds the user's calorie goal."""
        await self.cache.delete_by_pattern(cache_keys.daily_nutrition_pattern(user_id))
        await self.cache.delete_by_pattern(cache_keys.weekly_nutrition_pattern(user_id))
        await self.cache.delete_by_pattern(
            cache_keys.monthly_nutrition_pattern(user_id)
        )
        _logger.info("Dropped cached nutrition summaries for user %s", user_id)

    async def _drop_period_summaries(self, user_id: UUID, dates: set[date]) -> None:
        await self.cache.delete_by_pattern(cache_keys.weekly_nutrition_pattern(user_id))
        for month in sorted({(day.year, day.month) for day in dates}):
            await self.cache.delete(cache_keys.monthly_nutrition_key(user_id, *month))
