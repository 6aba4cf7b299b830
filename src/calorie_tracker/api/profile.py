"""User profile endpoints."""

from uuid import UUID

from fastapi import APIRouter, Depends, Request

from calorie_tracker.api.dependencies import current_user_id
from calorie_tracker.api.schemas import ProfileUpdateRequest
from calorie_tracker.containers import AppContainer
from calorie_tracker.domain.profiles import UserProfile

router = APIRouter(prefix="/profile", tags=["profile"])


@router.get("")
async def get_profile(
    request: Request, user_id: UUID = Depends(current_user_id)
) -> UserProfile:
    """Return the caller's profile."""
    container: AppContainer = request.app.state.container
    return await container.profile_service.get_profile(user_id)


@router.put("")
async def update_profile(
    body: ProfileUpdateRequest,
    request: Request,
    user_id: UUID = Depends(current_user_id),
) -> UserProfile:
    """Update body metrics or the daily calorie goal."""
    container: AppContainer = request.app.state.container
    return await container.profile_service.update_profile(
        user_id, body.model_dump(exclude_unset=True)
    )


@router.post("/recalculate-goal")
async def recalculate_goal(
    request: Request, user_id: UUID = Depends(current_user_id)
) -> UserProfile:
    """Derive the daily calorie goal from the stored body metrics."""
    container: AppContainer = request.app.state.container
    return await container.profile_service.recalculate_goal(user_id)
