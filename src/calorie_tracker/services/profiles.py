"""User profile service."""

import logging
from dataclasses import dataclass, replace
from typing import Protocol
from uuid import UUID

from pydantic import TypeAdapter

from calorie_tracker.domain.profiles import UserProfile, calculate_daily_calorie_goal
from calorie_tracker.errors import NotFoundError, ValidationFailure
from calorie_tracker.services import cache_keys
from calorie_tracker.services.cache import CacheGateway
from calorie_tracker.services.invalidation import CacheInvalidationPolicy

_PROFILE_ADAPTER = TypeAdapter(UserProfile)
_PROFILE_FIELDS = (
    "daily_calorie_goal",
    "height_cm",
    "weight_kg",
    "age",
    "gender",
    "activity_level",
)

_logger = logging.getLogger(__name__)


class ProfileRepository(Protocol):
    """Persistence interface for user profiles."""

    async def get_profile(self, user_id: UUID) -> UserProfile | None:
        """Return the user's profile if one exists."""

    async def upsert_profile(self, profile: UserProfile) -> UserProfile:
        """Create or replace the user's profile."""


@dataclass
class UserProfileService:
    """Service for body metrics and the daily calorie goal."""

    repository: ProfileRepository
    cache: CacheGateway
    invalidation: CacheInvalidationPolicy

    async def get_profile(self, user_id: UUID) -> UserProfile:
        """Return the user's profile or raise NotFoundError."""
        cache_key = cache_keys.user_profile_key(user_id)
        cached = await self.cache.get_typed(cache_key, _PROFILE_ADAPTER)
        if cached is not None:
            return cached

        profile = await self.repository.get_profile(user_id)
        if profile is None:
            raise NotFoundError(f"Profile for user {user_id} not found")
        await self.cache.set(
            cache_key, _PROFILE_ADAPTER.dump_python(profile, mode="json")
        )
        return profile

    async def update_profile(
        self, user_id: UUID, payload: dict[str, object]
    ) -> UserProfile:
        """Apply changed profile fields, creating the profile when missing."""
        unknown = set(payload) - set(_PROFILE_FIELDS)
        if unknown:
            raise ValidationFailure(f"Unknown profile fields: {sorted(unknown)}")
        goal = payload.get("daily_calorie_goal")
        if goal is not None and int(goal) <= 0:
            raise ValidationFailure("daily_calorie_goal must be positive")

        current = await self.repository.get_profile(user_id) or UserProfile(
            user_id=user_id
        )
        return await self._save(current, replace(current, **payload))

    async def recalculate_goal(self, user_id: UUID) -> UserProfile:
        """Derive the daily calorie goal from the stored body metrics."""
        current = await self.repository.get_profile(user_id)
        if current is None:
            raise NotFoundError(f"Profile for user {user_id} not found")
        goal = calculate_daily_calorie_goal(current)
        if goal is None:
            raise ValidationFailure("Height and weight are required to compute a goal")
        return await self._save(current, replace(current, daily_calorie_goal=goal))

    async def _save(self, current: UserProfile, updated: UserProfile) -> UserProfile:
        saved = await self.repository.upsert_profile(updated)
        await self.cache.delete(cache_keys.user_profile_key(saved.user_id))
        if saved.daily_calorie_goal != current.daily_calorie_goal:
            await self.invalidation.goal_changed(saved.user_id)
            _logger.info(
                "Daily calorie goal for user %s changed to %s",
                saved.user_id,
                saved.daily_calorie_goal,
            )
        return saved
