"""Tests for the locale catalog service."""

import asyncio
from uuid import uuid4

import pytest

from calorie_tracker.domain.foods import FoodQuery
from calorie_tracker.domain.locales import LocaleQuery
from calorie_tracker.errors import NotFoundError, ValidationFailure


def test_list_locales_filters_by_name_or_region(db, locale_service) -> None:
    db.add_locale("Italy", "IT", region="Europe", currency_code="EUR")
    db.add_locale("Japan", "JP", region="Asia")
    db.add_locale("France", "FR", region="Europe")

    europe = asyncio.run(locale_service.list_locales(LocaleQuery(text="europe")))
    japan = asyncio.run(locale_service.list_locales(LocaleQuery(text="JAP")))

    assert [locale.name for locale in europe.locales] == ["France", "Italy"]
    assert europe.total_count == 2
    assert europe.total_pages == 1
    assert [locale.code for locale in japan.locales] == ["JP"]


def test_list_locales_pages_and_caches(db, locale_service, locale_repository) -> None:
    for index in range(3):
        db.add_locale(f"Locale {index}", f"L{index}")

    first = asyncio.run(locale_service.list_locales(LocaleQuery(page=2, limit=2)))
    again = asyncio.run(locale_service.list_locales(LocaleQuery(page=2, limit=2)))

    assert [locale.name for locale in first.locales] == ["Locale 2"]
    assert first.total_pages == 2
    assert again == first
    assert locale_repository.calls == 1


def test_list_locales_rejects_bad_page(locale_service) -> None:
    with pytest.raises(ValidationFailure):
        asyncio.run(locale_service.list_locales(LocaleQuery(page=0)))


def test_get_locale_is_cached(db, locale_service, locale_repository) -> None:
    italy = db.add_locale("Italy", "IT", language_code="it")

    assert asyncio.run(locale_service.get_locale(italy.id)) == italy
    assert asyncio.run(locale_service.get_locale(italy.id)) == italy
    assert locale_repository.calls == 1


def test_get_unknown_locale(locale_service) -> None:
    with pytest.raises(NotFoundError):
        asyncio.run(locale_service.get_locale(42))


def test_list_foods_returns_visible_foods_of_locale(
    db, locale_service, user_id
) -> None:
    italy = db.add_locale("Italy", "IT")
    japan = db.add_locale("Japan", "JP")
    db.add_food(name="Pasta", locale_id=italy.id, category="grains")
    db.add_food(name="Pizza", locale_id=italy.id, category="dishes")
    db.add_food(name="Burrata", locale_id=italy.id, is_public=False, user_id=uuid4())
    db.add_food(name="Ramen", locale_id=japan.id)

    page = asyncio.run(locale_service.list_foods(user_id, italy.id, FoodQuery()))
    grains = asyncio.run(
        locale_service.list_foods(user_id, italy.id, FoodQuery(category="grains"))
    )

    assert [food.name for food in page.foods] == ["Pasta", "Pizza"]
    assert [food.name for food in grains.foods] == ["Pasta"]


def test_list_foods_of_unknown_locale(locale_service, user_id) -> None:
    with pytest.raises(NotFoundError):
        asyncio.run(locale_service.list_foods(user_id, 7, FoodQuery()))
