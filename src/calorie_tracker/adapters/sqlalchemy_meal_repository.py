"""SQLAlchemy implementation of the meal store."""

import uuid
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass
from datetime import date
from uuid import UUID

from sqlalchemy import Select, delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.orm import selectinload

from calorie_tracker.adapters.database import ensure_user, transaction
from calorie_tracker.adapters.sqlalchemy_food_repository import to_food
from calorie_tracker.adapters.sqlalchemy_tables import FoodRow, MealFoodRow, MealRow
from calorie_tracker.domain.foods import Food
from calorie_tracker.domain.meals import (
    FoodLineSnapshot,
    Meal,
    MealFields,
    MealFoodLine,
    MealQuery,
    MealType,
)
from calorie_tracker.domain.nutrition import MacroProfile

_MEAL_TYPE_ORDER = list(MealType)


@dataclass
class SqlAlchemyMealStore:
    """Meal store opening one database transaction per unit of work."""

    session_factory: async_sessionmaker[AsyncSession]

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator["SqlAlchemyMealTransaction"]:
        """Yield a meal transaction committed when the block exits cleanly."""
        async with transaction(self.session_factory) as session:
            yield SqlAlchemyMealTransaction(session)


@dataclass
class SqlAlchemyMealTransaction:
    """Meal and food-line statements bound to one session."""

    session: AsyncSession

    async def get_food(self, food_id: UUID) -> Food | None:
        row = await self.session.get(FoodRow, food_id)
        return to_food(row) if row is not None else None

    async def get_meal(
        self, meal_id: UUID, user_id: UUID, *, lock: bool = False
    ) -> Meal | None:
        stmt = select_owned_meal(meal_id, user_id, lock=lock)
        row = (await self.session.execute(stmt)).scalar_one_or_none()
        return _to_meal(row) if row is not None else None

    async def insert_meal(
        self, user_id: UUID, fields: MealFields, totals: MacroProfile
    ) -> UUID:
        await ensure_user(self.session, user_id)
        row = MealRow(id=uuid.uuid4(), user_id=user_id)
        _apply_fields(row, fields)
        _apply_totals(row, totals)
        self.session.add(row)
        await self.session.flush()
        return row.id

    async def update_meal(
        self, meal_id: UUID, fields: MealFields, totals: MacroProfile | None
    ) -> None:
        row = await self.session.get(MealRow, meal_id)
        if row is None:
            return
        _apply_fields(row, fields)
        if totals is not None:
            _apply_totals(row, totals)
        await self.session.flush()

    async def insert_food_lines(
        self, meal_id: UUID, lines: list[FoodLineSnapshot]
    ) -> None:
        offset = await self.session.scalar(
            select(func.count()).select_from(MealFoodRow).where(
                MealFoodRow.meal_id == meal_id
            )
        )
        self.session.add_all(
            [
                MealFoodRow(
                    id=uuid.uuid4(),
                    meal_id=meal_id,
                    food_id=line.food_id,
                    position=(offset or 0) + index,
                    food_name=line.food_name,
                    quantity=line.quantity,
                    calories=line.calories,
                    protein_g=line.protein_g,
                    carbs_g=line.carbs_g,
                    fat_g=line.fat_g,
                )
                for index, line in enumerate(lines)
            ]
        )
        await self.session.flush()

    async def list_food_lines(self, meal_id: UUID) -> list[MealFoodLine]:
        rows = await self.session.scalars(
            select(MealFoodRow)
            .where(MealFoodRow.meal_id == meal_id)
            .order_by(MealFoodRow.position)
        )
        return [_to_line(row) for row in rows]

    async def delete_food_lines(
        self, meal_id: UUID, food_id: UUID | None = None
    ) -> int:
        stmt = delete(MealFoodRow).where(MealFoodRow.meal_id == meal_id)
        if food_id is not None:
            stmt = stmt.where(MealFoodRow.food_id == food_id)
        result = await self.session.execute(stmt)
        return result.rowcount

    async def delete_meal(self, meal_id: UUID) -> bool:
        result = await self.session.execute(
            delete(MealRow).where(MealRow.id == meal_id)
        )
        return result.rowcount > 0

    async def list_meals(
        self, user_id: UUID, query: MealQuery
    ) -> tuple[list[Meal], int]:
        filters = [MealRow.user_id == user_id]
        if query.start_date is not None:
            filters.append(MealRow.meal_date >= query.start_date)
        if query.end_date is not None:
            filters.append(MealRow.meal_date <= query.end_date)
        if query.meal_type is not None:
            filters.append(MealRow.meal_type == query.meal_type)

        total = await self.session.scalar(
            select(func.count()).select_from(MealRow).where(*filters)
        )
        rows = await self.session.scalars(
            select(MealRow)
            .where(*filters)
            .options(selectinload(MealRow.lines))
            .order_by(MealRow.meal_date.desc(), MealRow.created_at.desc())
            .offset((query.page - 1) * query.limit)
            .limit(query.limit)
        )
        return [_to_meal(row) for row in rows], total or 0

    async def list_meals_by_date(self, user_id: UUID, day: date) -> list[Meal]:
        rows = await self.session.scalars(
            select(MealRow)
            .where(MealRow.user_id == user_id, MealRow.meal_date == day)
            .options(selectinload(MealRow.lines))
            .order_by(MealRow.created_at)
        )
        meals = [_to_meal(row) for row in rows]
        return sorted(meals, key=lambda meal: _MEAL_TYPE_ORDER.index(meal.meal_type))


def select_owned_meal(meal_id: UUID, user_id: UUID, *, lock: bool = False) -> Select:
    """Build the owner-scoped meal query, locking the meal row when asked."""
    stmt = (
        select(MealRow)
        .where(MealRow.id == meal_id, MealRow.user_id == user_id)
        .options(selectinload(MealRow.lines))
        .execution_options(populate_existing=True)
    )
    if lock:
        stmt = stmt.with_for_update(of=MealRow)
    return stmt


def _apply_fields(row: MealRow, fields: MealFields) -> None:
    row.meal_type = fields.meal_type
    row.meal_date = fields.meal_date
    row.meal_time = fields.meal_time
    row.name = fields.name
    row.notes = fields.notes


def _apply_totals(row: MealRow, totals: MacroProfile) -> None:
    row.total_calories = totals.calories
    row.total_protein_g = totals.protein_g
    row.total_carbs_g = totals.carbs_g
    row.total_fat_g = totals.fat_g


def _to_line(row: MealFoodRow) -> MealFoodLine:
    return MealFoodLine(
        id=row.id,
        meal_id=row.meal_id,
        food_id=row.food_id,
        food_name=row.food_name,
        quantity=row.quantity,
        calories=row.calories,
        protein_g=row.protein_g,
        carbs_g=row.carbs_g,
        fat_g=row.fat_g,
    )


def _to_meal(row: MealRow) -> Meal:
    return Meal(
        id=row.id,
        user_id=row.user_id,
        meal_type=MealType(row.meal_type),
        meal_date=row.meal_date,
        meal_time=row.meal_time,
        name=row.name,
        notes=row.notes,
        total_calories=row.total_calories,
        total_protein_g=row.total_protein_g,
        total_carbs_g=row.total_carbs_g,
        total_fat_g=row.total_fat_g,
        lines=[_to_line(line) for line in row.lines],
    )
