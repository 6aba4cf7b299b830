"""Tests for cache invalidation rules."""

import asyncio
from datetime import date
from uuid import uuid4

from calorie_tracker.services import cache_keys
from calorie_tracker.services.cache import CacheGateway
from calorie_tracker.services.invalidation import CacheInvalidationPolicy
from tests.conftest import UnavailableCache


def _seed(memory_cache, user_id, meal_id) -> dict[str, str]:
    keys = {
        "meal": cache_keys.meal_key(meal_id, user_id),
        "list": f"meals:user:{user_id}:page1:limit20:start:end:type",
        "day1": cache_keys.daily_nutrition_key(user_id, date(2024, 1, 10)),
        "day2": cache_keys.daily_nutrition_key(user_id, date(2024, 2, 3)),
        "day3": cache_keys.daily_nutrition_key(user_id, date(2024, 3, 1)),
        "week": cache_keys.weekly_nutrition_key(
            user_id, date(2024, 1, 8), date(2024, 1, 14)
        ),
        "jan": cache_keys.monthly_nutrition_key(user_id, 2024, 1),
        "mar": cache_keys.monthly_nutrition_key(user_id, 2024, 3),
        "profile": cache_keys.user_profile_key(user_id),
    }
    for key in keys.values():
        asyncio.run(memory_cache.set(key, {}, 60))
    return keys


def test_meal_created_drops_day_lists_and_periods(
    memory_cache, invalidation, user_id
) -> None:
    keys = _seed(memory_cache, user_id, uuid4())
    other_user = cache_keys.daily_nutrition_key(uuid4(), date(2024, 1, 10))
    asyncio.run(memory_cache.set(other_user, {}, 60))

    asyncio.run(invalidation.meal_created(user_id, date(2024, 1, 10)))

    remaining = set(memory_cache.keys())
    assert keys["day1"] not in remaining
    assert keys["list"] not in remaining
    assert keys["week"] not in remaining
    assert keys["jan"] not in remaining
    assert {keys["meal"], keys["day2"], keys["mar"], keys["profile"], other_user} <= (
        remaining
    )


def test_meal_changed_drops_both_dates(memory_cache, invalidation, user_id) -> None:
    meal_id = uuid4()
    keys = _seed(memory_cache, user_id, meal_id)

    asyncio.run(
        invalidation.meal_changed(
            user_id, meal_id, date(2024, 1, 10), date(2024, 2, 3)
        )
    )

    remaining = set(memory_cache.keys())
    for name in ("meal", "list", "day1", "day2", "week", "jan"):
        assert keys[name] not in remaining
    assert keys["day3"] in remaining
    assert keys["mar"] in remaining


def test_goal_changed_drops_all_summaries(memory_cache, invalidation, user_id) -> None:
    keys = _seed(memory_cache, user_id, uuid4())

    asyncio.run(invalidation.goal_changed(user_id))

    assert set(memory_cache.keys()) == {keys["meal"], keys["list"], keys["profile"]}


def test_invalidation_survives_unavailable_cache(user_id) -> None:
    policy = CacheInvalidationPolicy(CacheGateway(UnavailableCache()))

    asyncio.run(policy.meal_created(user_id, date(2024, 1, 10)))
    asyncio.run(policy.meal_changed(user_id, uuid4(), date(2024, 1, 10)))
    asyncio.run(policy.goal_changed(user_id))
