"""Tests for the SQLAlchemy schema and statements."""

from datetime import date
from uuid import uuid4

from sqlalchemy.dialects import postgresql

from calorie_tracker.adapters.sqlalchemy_meal_repository import select_owned_meal
from calorie_tracker.adapters.sqlalchemy_nutrition_repository import (
    daily_totals_statement,
)
from calorie_tracker.adapters.sqlalchemy_tables import Base, MealFoodRow, MealRow


def _sql(statement) -> str:  # type: ignore[no-untyped-def]
    return str(statement.compile(dialect=postgresql.dialect()))


def test_schema_declares_all_tables() -> None:
    assert set(Base.metadata.tables) == {
        "users",
        "user_profiles",
        "locales",
        "foods",
        "meals",
        "meal_foods",
    }


def test_meal_lines_cascade_with_meals_and_foods() -> None:
    foreign_keys = {
        fk.column.table.name: fk.ondelete for fk in MealFoodRow.__table__.foreign_keys
    }

    assert foreign_keys == {"meals": "CASCADE", "foods": "CASCADE"}


def test_meal_type_is_constrained_to_known_values() -> None:
    column_type = MealRow.__table__.c.meal_type.type

    assert column_type.enums == ["breakfast", "lunch", "dinner", "snack"]


def test_locked_meal_lookup_selects_for_update() -> None:
    locked = _sql(select_owned_meal(uuid4(), uuid4(), lock=True))
    unlocked = _sql(select_owned_meal(uuid4(), uuid4()))

    assert "FOR UPDATE OF meals" in locked
    assert "FOR UPDATE" not in unlocked
    assert "meals.user_id" in unlocked


def test_daily_totals_group_by_meal_date() -> None:
    sql = _sql(daily_totals_statement(uuid4(), date(2024, 1, 1), date(2024, 1, 31)))

    assert "sum(meals.total_calories)" in sql
    assert "GROUP BY meals.meal_date" in sql
    assert "count(meals.id)" in sql
