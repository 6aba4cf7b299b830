"""Services for the regional locale catalog."""

from dataclasses import dataclass, replace
from typing import Protocol
from uuid import UUID

from pydantic import TypeAdapter

from calorie_tracker.domain.foods import FoodPage, FoodQuery
from calorie_tracker.domain.locales import Locale, LocalePage, LocaleQuery
from calorie_tracker.errors import NotFoundError
from calorie_tracker.services import cache_keys
from calorie_tracker.services.cache import CacheGateway
from calorie_tracker.services.foods import FoodCatalogService
from calorie_tracker.services.paging import total_pages, validate_page

_LOCALE_ADAPTER = TypeAdapter(Locale)
_PAGE_ADAPTER = TypeAdapter(LocalePage)


class LocaleRepository(Protocol):
    """Read access to the locale catalog."""

    async def get_locale(self, locale_id: int) -> Locale | None:
        """Return a locale by id."""

    async def search_locales(self, query: LocaleQuery) -> tuple[list[Locale], int]:
        """Return one page of locales ordered by name and region, plus the total."""


@dataclass
class LocaleService:
    """Cached locale lookups and per-locale food listings."""

    repository: LocaleRepository
    cache: CacheGateway
    foods: FoodCatalogService
    ttl_seconds: int = 86400

    async def list_locales(self, query: LocaleQuery) -> LocalePage:
        validate_page(query.page, query.limit)
        cache_key = cache_keys.locales_key(query)
        cached = await self.cache.get_typed(cache_key, _PAGE_ADAPTER)
        if cached is not None:
            return cached

        locales, total = await self.repository.search_locales(query)
        page = LocalePage(
            locales=locales,
            total_count=total,
            page=query.page,
            total_pages=total_pages(total, query.limit),
        )
        await self.cache.set(
            cache_key,
            _PAGE_ADAPTER.dump_python(page, mode="json"),
            ttl_seconds=self.ttl_seconds,
        )
        return page

    async def get_locale(self, locale_id: int) -> Locale:
        """Return a locale, or raise NotFoundError."""
        cache_key = cache_keys.locale_key(locale_id)
        cached = await self.cache.get_typed(cache_key, _LOCALE_ADAPTER)
        if cached is not None:
            return cached

        locale = await self.repository.get_locale(locale_id)
        if locale is None:
            raise NotFoundError(f"Locale {locale_id} not found")
        await self.cache.set(
            cache_key,
            _LOCALE_ADAPTER.dump_python(locale, mode="json"),
            ttl_seconds=self.ttl_seconds,
        )
        return locale

    async def list_foods(
        self, user_id: UUID, locale_id: int, query: FoodQuery
    ) -> FoodPage:
        """Return foods of a locale that are visible to the user."""
        await self.get_locale(locale_id)
        return await self.foods.search(user_id, replace(query, locale_id=locale_id))
