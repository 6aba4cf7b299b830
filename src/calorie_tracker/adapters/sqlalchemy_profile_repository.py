"""SQLAlchemy repository for user profiles."""

from dataclasses import dataclass
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from calorie_tracker.adapters.database import ensure_user, transaction
from calorie_tracker.adapters.sqlalchemy_tables import UserProfileRow
from calorie_tracker.domain.profiles import UserProfile


@dataclass
class SqlAlchemyProfileRepository:
    """Profile repository backed by the ``user_profiles`` table."""

    session_factory: async_sessionmaker[AsyncSession]

    async def get_profile(self, user_id: UUID) -> UserProfile | None:
        async with transaction(self.session_factory) as session:
            row = await session.get(UserProfileRow, user_id)
            return _to_profile(row) if row is not None else None

    async def upsert_profile(self, profile: UserProfile) -> UserProfile:
        async with transaction(self.session_factory) as session:
            await ensure_user(session, profile.user_id)
            row = await session.get(UserProfileRow, profile.user_id)
            if row is None:
                row = UserProfileRow(user_id=profile.user_id)
                session.add(row)
            row.daily_calorie_goal = profile.daily_calorie_goal
            row.height_cm = profile.height_cm
            row.weight_kg = profile.weight_kg
            row.age = profile.age
            row.gender = profile.gender
            row.activity_level = profile.activity_level
            await session.flush()
            return _to_profile(row)


def _to_profile(row: UserProfileRow) -> UserProfile:
    return UserProfile(
        user_id=row.user_id,
        daily_calorie_goal=row.daily_calorie_goal,
        height_cm=row.height_cm,
        weight_kg=row.weight_kg,
        age=row.age,
        gender=row.gender,
        activity_level=row.activity_level,
    )
