"""Locale catalog endpoints."""

from uuid import UUID

from fastapi import APIRouter, Depends, Request

from calorie_tracker.api.dependencies import current_user_id
from calorie_tracker.containers import AppContainer
from calorie_tracker.domain.foods import FoodPage, FoodQuery
from calorie_tracker.domain.locales import Locale, LocalePage, LocaleQuery

router = APIRouter(prefix="/locales", tags=["locales"])


@router.get("")
async def list_locales(
    request: Request, q: str | None = None, page: int = 1, limit: int = 50
) -> LocalePage:
    """List locales, optionally filtered by name or region."""
    container: AppContainer = request.app.state.container
    return await container.locale_service.list_locales(
        LocaleQuery(text=q, page=page, limit=limit)
    )


@router.get("/{locale_id}/foods")
async def list_locale_foods(
    locale_id: int,
    request: Request,
    user_id: UUID = Depends(current_user_id),
    q: str | None = None,
    category: str | None = None,
    page: int = 1,
    limit: int = 50,
) -> FoodPage:
    """List foods of a locale that the caller can see."""
    container: AppContainer = request.app.state.container
    query = FoodQuery(text=q, category=category, page=page, limit=limit)
    return await container.locale_service.list_foods(user_id, locale_id, query)


@router.get("/{locale_id}")
async def get_locale(locale_id: int, request: Request) -> Locale:
    container: AppContainer = request.app.state.container
    return await container.locale_service.get_locale(locale_id)
