"""SQLAlchemy queries backing nutrition reports."""

from dataclasses import dataclass
from datetime import date
from uuid import UUID

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from calorie_tracker.adapters.database import transaction
from calorie_tracker.adapters.sqlalchemy_tables import MealRow, UserProfileRow
from calorie_tracker.domain.reports import DailyTotals


@dataclass
class SqlAlchemyNutritionRepository:
    """Sums denormalized meal totals grouped by meal date."""

    session_factory: async_sessionmaker[AsyncSession]

    async def sum_meals_by_day(
        self, user_id: UUID, start: date, end: date
    ) -> list[DailyTotals]:
        stmt = daily_totals_statement(user_id, start, end)
        async with transaction(self.session_factory) as session:
            result = await session.execute(stmt)
            return [
                DailyTotals(
                    day=meal_date,
                    calories=float(calories),
                    protein_g=float(protein),
                    carbs_g=float(carbs),
                    fat_g=float(fat),
                    meal_count=int(count),
                )
                for meal_date, calories, protein, carbs, fat, count in result.all()
            ]

    async def get_daily_calorie_goal(self, user_id: UUID) -> int | None:
        async with transaction(self.session_factory) as session:
            return await session.scalar(
                select(UserProfileRow.daily_calorie_goal).where(
                    UserProfileRow.user_id == user_id
                )
            )


def daily_totals_statement(user_id: UUID, start: date, end: date) -> Select:
    """Sum meal totals per meal date within an inclusive range."""
    return (
        select(
            MealRow.meal_date,
            func.coalesce(func.sum(MealRow.total_calories), 0.0),
            func.coalesce(func.sum(MealRow.total_protein_g), 0.0),
            func.coalesce(func.sum(MealRow.total_carbs_g), 0.0),
            func.coalesce(func.sum(MealRow.total_fat_g), 0.0),
            func.count(MealRow.id),
        )
        .where(
            MealRow.user_id == user_id,
            MealRow.meal_date >= start,
            MealRow.meal_date <= end,
        )
        .group_by(MealRow.meal_date)
        .order_by(MealRow.meal_date)
    )
