"""Meal logging endpoints."""

from datetime import date
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status

from calorie_tracker.api.dependencies import current_user_id
from calorie_tracker.api.schemas import MealCreateRequest, MealUpdateRequest
from calorie_tracker.containers import AppContainer
from calorie_tracker.domain.meals import Meal, MealPage, MealQuery, parse_meal_type

router = APIRouter(prefix="/meals", tags=["meals"])


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_meal(
    body: MealCreateRequest,
    request: Request,
    user_id: UUID = Depends(current_user_id),
) -> Meal:
    """Log a meal with its food lines."""
    container: AppContainer = request.app.state.container
    return await container.meal_service.create_meal(user_id, body.to_input())


@router.get("")
async def list_meals(
    request: Request,
    user_id: UUID = Depends(current_user_id),
    page: int = 1,
    limit: int = 20,
    start_date: date | None = None,
    end_date: date | None = None,
    meal_type: str | None = None,
) -> MealPage:
    """Return a page of the caller's meals, newest first."""
    container: AppContainer = request.app.state.container
    query = MealQuery(
        page=page,
        limit=limit,
        start_date=start_date,
        end_date=end_date,
        meal_type=parse_meal_type(meal_type) if meal_type else None,
    )
    return await container.meal_service.list_meals(user_id, query)


@router.get("/date/{day}")
async def list_meals_by_date(
    day: date, request: Request, user_id: UUID = Depends(current_user_id)
) -> list[Meal]:
    """Return the caller's meals for one day."""
    container: AppContainer = request.app.state.container
    return await container.meal_service.list_meals_by_date(user_id, day)


@router.get("/{meal_id}")
async def get_meal(
    meal_id: UUID, request: Request, user_id: UUID = Depends(current_user_id)
) -> Meal:
    """Return one meal with its food lines."""
    container: AppContainer = request.app.state.container
    return await container.meal_service.get_meal(meal_id, user_id)


@router.put("/{meal_id}")
async def update_meal(
    meal_id: UUID,
    body: MealUpdateRequest,
    request: Request,
    user_id: UUID = Depends(current_user_id),
) -> Meal:
    """Patch a meal, replacing its foods when they are given."""
    container: AppContainer = request.app.state.container
    return await container.meal_service.update_meal(
        meal_id, user_id, body.to_update()
    )


@router.delete("/{meal_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_meal(
    meal_id: UUID, request: Request, user_id: UUID = Depends(current_user_id)
) -> Response:
    """Delete a meal and its food lines."""
    container: AppContainer = request.app.state.container
    if not await container.meal_service.delete_meal(meal_id, user_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/{meal_id}/foods/{food_id}")
async def remove_food_line(
    meal_id: UUID,
    food_id: UUID,
    request: Request,
    user_id: UUID = Depends(current_user_id),
) -> Meal:
    """Remove a food from a meal and return the re-summed meal."""
    container: AppContainer = request.app.state.container
    return await container.meal_service.remove_food_line(meal_id, food_id, user_id)
