"""Food catalog and USDA import endpoints."""

from uuid import UUID

from fastapi import APIRouter, Depends, Request, Response, status

from calorie_tracker.api.dependencies import current_user_id
from calorie_tracker.api.schemas import FoodCreateRequest, FoodUpdateRequest
from calorie_tracker.containers import AppContainer
from calorie_tracker.domain.foods import Food, FoodPage, FoodQuery
from calorie_tracker.domain.nutrition import FoodSummary

router = APIRouter(prefix="/foods", tags=["foods"])


@router.get("")
async def search_foods(
    request: Request,
    user_id: UUID = Depends(current_user_id),
    q: str | None = None,
    category: str | None = None,
    locale_id: int | None = None,
    page: int = 1,
    limit: int = 20,
) -> FoodPage:
    """Search foods visible to the caller."""
    container: AppContainer = request.app.state.container
    query = FoodQuery(
        text=q, category=category, locale_id=locale_id, page=page, limit=limit
    )
    return await container.food_service.search(user_id, query)


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_food(
    body: FoodCreateRequest,
    request: Request,
    user_id: UUID = Depends(current_user_id),
) -> Food:
    """Create a private food, or return a visible one with the same name."""
    container: AppContainer = request.app.state.container
    return await container.food_service.create_food(
        user_id, body.model_dump(exclude_none=True)
    )


@router.get("/usda/search")
async def search_usda(
    q: str,
    request: Request,
    limit: int = 10,
    _user_id: UUID = Depends(current_user_id),
) -> list[FoodSummary]:
    """Search USDA FoodData Central."""
    container: AppContainer = request.app.state.container
    return await container.food_import_service.search(q, limit)


@router.post("/usda/{fdc_id}/import", status_code=status.HTTP_201_CREATED)
async def import_usda_food(
    fdc_id: int, request: Request, user_id: UUID = Depends(current_user_id)
) -> Food:
    """Copy a USDA food into the caller's catalog."""
    container: AppContainer = request.app.state.container
    return await container.food_import_service.import_food(user_id, fdc_id)


@router.get("/{food_id}")
async def get_food(
    food_id: UUID, request: Request, user_id: UUID = Depends(current_user_id)
) -> Food:
    """Return a food visible to the caller."""
    container: AppContainer = request.app.state.container
    return await container.food_service.get_food(food_id, user_id)


@router.put("/{food_id}")
async def update_food(
    food_id: UUID,
    body: FoodUpdateRequest,
    request: Request,
    user_id: UUID = Depends(current_user_id),
) -> Food:
    """Update a food owned by the caller."""
    container: AppContainer = request.app.state.container
    return await container.food_service.update_food(
        food_id, user_id, body.model_dump(exclude_unset=True)
    )


@router.delete("/{food_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_food(
    food_id: UUID, request: Request, user_id: UUID = Depends(current_user_id)
) -> Response:
    """Delete a food owned by the caller."""
    container: AppContainer = request.app.state.container
    await container.food_service.delete_food(food_id, user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
