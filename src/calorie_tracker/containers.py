"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from calorie_tracker.adapters.database import (
    create_engine,
    create_schema,
    create_session_factory,
)
from calorie_tracker.adapters.fdc_client import HttpxFdcClient
from calorie_tracker.adapters.redis_cache import RedisCache
from calorie_tracker.adapters.sqlalchemy_food_repository import (
    SqlAlchemyFoodRepository,
)
from calorie_tracker.adapters.sqlalchemy_locale_repository import (
    SqlAlchemyLocaleRepository,
)
from calorie_tracker.adapters.sqlalchemy_meal_repository import SqlAlchemyMealStore
from calorie_tracker.adapters.sqlalchemy_nutrition_repository import (
    SqlAlchemyNutritionRepository,
)
from calorie_tracker.adapters.sqlalchemy_profile_repository import (
    SqlAlchemyProfileRepository,
)
from calorie_tracker.config import Settings
from calorie_tracker.services.cache import Cache, CacheGateway, InMemoryCache
from calorie_tracker.services.food_import import FoodImportService
from calorie_tracker.services.foods import FoodCatalogService
from calorie_tracker.services.invalidation import CacheInvalidationPolicy
from calorie_tracker.services.locales import LocaleService
from calorie_tracker.services.meals import MealService
from calorie_tracker.services.profiles import UserProfileService
from calorie_tracker.services.reports import NutritionReportService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    cache: CacheGateway
    food_service: FoodCatalogService
    food_import_service: FoodImportService
    locale_service: LocaleService
    meal_service: MealService
    report_service: NutritionReportService
    profile_service: UserProfileService
    initialize: Callable[[], Awaitable[None]]
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    engine = create_engine(
        resolved_settings.database_url,
        pool_size=resolved_settings.database_pool_size,
        timeout_seconds=resolved_settings.store_timeout_seconds,
    )
    session_factory = create_session_factory(engine)

    redis_cache = (
        RedisCache.create(
            resolved_settings.redis_url,
            timeout_seconds=resolved_settings.cache_timeout_seconds,
        )
        if resolved_settings.redis_url
        else None
    )
    backend: Cache = redis_cache if redis_cache is not None else InMemoryCache()
    cache = CacheGateway(
        backend=backend,
        default_ttl_seconds=resolved_settings.cache_ttl_seconds,
        timeout_seconds=resolved_settings.cache_timeout_seconds,
    )
    invalidation = CacheInvalidationPolicy(cache)

    food_service = FoodCatalogService(SqlAlchemyFoodRepository(session_factory), cache)
    fdc_client = HttpxFdcClient.create(
        api_key=resolved_settings.fdc_api_key,
        base_url=resolved_settings.fdc_base_url,
    )
    food_import_service = FoodImportService(
        fdc_client=fdc_client,
        cache=cache,
        foods=food_service,
    )
    locale_service = LocaleService(
        repository=SqlAlchemyLocaleRepository(session_factory),
        cache=cache,
        foods=food_service,
    )
    meal_service = MealService(
        store=SqlAlchemyMealStore(session_factory),
        cache=cache,
        invalidation=invalidation,
    )
    report_service = NutritionReportService(
        SqlAlchemyNutritionRepository(session_factory), cache
    )
    profile_service = UserProfileService(
        repository=SqlAlchemyProfileRepository(session_factory),
        cache=cache,
        invalidation=invalidation,
    )

    async def initialize() -> None:
        if resolved_settings.auto_create_schema:
            await create_schema(engine)

    async def close_resources() -> None:
        await fdc_client.close()
        if redis_cache is not None:
            await redis_cache.close()
        await engine.dispose()

    return AppContainer(
        settings=resolved_settings,
        cache=cache,
        food_service=food_service,
        food_import_service=food_import_service,
        locale_service=locale_service,
        meal_service=meal_service,
        report_service=report_service,
        profile_service=profile_service,
        initialize=initialize,
        close_resources=close_resources,
    )
