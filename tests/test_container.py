"""Tests for container wiring."""

import asyncio

from calorie_tracker.adapters.redis_cache import RedisCache
from calorie_tracker.containers import build_container
from calorie_tracker.services.cache import InMemoryCache


def test_build_container_creates_services(settings) -> None:
    container = build_container(settings)

    assert container.meal_service is not None
    assert container.report_service.cache is container.cache
    assert container.locale_service.foods is container.food_service
    assert isinstance(container.cache.backend, InMemoryCache)
    assert container.cache.default_ttl_seconds == 3600
    asyncio.run(container.close_resources())


def test_redis_url_selects_redis_backend(settings) -> None:
    settings.redis_url = "redis://localhost:6379/0"

    container = build_container(settings)

    assert isinstance(container.cache.backend, RedisCache)
    asyncio.run(container.close_resources())
