"""SQLAlchemy repository for catalog foods."""

import uuid
from dataclasses import dataclass
from uuid import UUID

from sqlalchemy import delete, exists, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from calorie_tracker.adapters.database import ensure_user, transaction
from calorie_tracker.adapters.sqlalchemy_tables import FoodRow, MealFoodRow
from calorie_tracker.domain.foods import Food, FoodQuery
from calorie_tracker.errors import NotFoundError


@dataclass
class SqlAlchemyFoodRepository:
    """Food repository backed by the ``foods`` table."""

    session_factory: async_sessionmaker[AsyncSession]

    async def get_food(self, food_id: UUID) -> Food | None:
        async with transaction(self.session_factory) as session:
            row = await session.get(FoodRow, food_id)
            return to_food(row) if row is not None else None

    async def find_by_name(self, user_id: UUID, name: str) -> Food | None:
        async with transaction(self.session_factory) as session:
            row = await session.scalar(
                select(FoodRow)
                .where(_visible_to(user_id), FoodRow.name == name)
                .order_by(FoodRow.is_public)
                .limit(1)
            )
            return to_food(row) if row is not None else None

    async def find_by_external_id(
        self, user_id: UUID, external_id: str
    ) -> Food | None:
        async with transaction(self.session_factory) as session:
            row = await session.scalar(
                select(FoodRow)
                .where(_visible_to(user_id), FoodRow.external_id == external_id)
                .order_by(FoodRow.is_public)
                .limit(1)
            )
            return to_food(row) if row is not None else None

    async def search_foods(
        self, user_id: UUID, query: FoodQuery
    ) -> tuple[list[Food], int]:
        filters = [_visible_to(user_id)]
        if query.text:
            filters.append(FoodRow.name.ilike(f"%{query.text}%"))
        if query.category:
            filters.append(FoodRow.category == query.category)
        if query.locale_id is not None:
            filters.append(FoodRow.locale_id == query.locale_id)

        async with transaction(self.session_factory) as session:
            total = await session.scalar(
                select(func.count()).select_from(FoodRow).where(*filters)
            )
            rows = await session.scalars(
                select(FoodRow)
                .where(*filters)
                .order_by(FoodRow.name)
                .offset((query.page - 1) * query.limit)
                .limit(query.limit)
            )
            return [to_food(row) for row in rows], total or 0

    async def create_food(self, user_id: UUID, payload: dict[str, object]) -> Food:
        async with transaction(self.session_factory) as session:
            await ensure_user(session, user_id)
            row = FoodRow(id=uuid.uuid4(), user_id=user_id, is_public=False, **payload)
            session.add(row)
            await session.flush()
            return to_food(row)

    async def update_food(self, food_id: UUID, payload: dict[str, object]) -> Food:
        async with transaction(self.session_factory) as session:
            row = await session.get(FoodRow, food_id)
            if row is None:
                raise NotFoundError(f"Food {food_id} not found")
            for field, value in payload.items():
                setattr(row, field, value)
            await session.flush()
            return to_food(row)

    async def delete_food(self, food_id: UUID) -> None:
        async with transaction(self.session_factory) as session:
            await session.execute(delete(FoodRow).where(FoodRow.id == food_id))

    async def is_referenced(self, food_id: UUID) -> bool:
        async with transaction(self.session_factory) as session:
            return bool(
                await session.scalar(
                    select(exists().where(MealFoodRow.food_id == food_id))
                )
            )


def _visible_to(user_id: UUID):
    return or_(FoodRow.is_public.is_(True), FoodRow.user_id == user_id)


def to_food(row: FoodRow) -> Food:
    """Map a food row to the domain model."""
    return Food(
        id=row.id,
        name=row.name,
        calories=row.calories,
        protein_g=row.protein_g,
        carbs_g=row.carbs_g,
        fat_g=row.fat_g,
        fiber_g=row.fiber_g,
        sugar_g=row.sugar_g,
        sodium_mg=row.sodium_mg,
        serving_size=row.serving_size,
        serving_unit=row.serving_unit,
        category=row.category,
        description=row.description,
        locale_id=row.locale_id,
        user_id=row.user_id,
        is_public=row.is_public,
        external_id=row.external_id,
    )
