"""Domain models for nutrition reporting."""

from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True)
class DailyTotals:
    """Summed meal totals for one calendar day."""

    day: date
    calories: float
    protein_g: float
    carbs_g: float
    fat_g: float
    meal_count: int


@dataclass(frozen=True)
class DailyNutrition:
    """A user's nutrition for one day with their calorie goal attached."""

    day: date
    total_calories: float
    total_protein_g: float
    total_carbs_g: float
    total_fat_g: float
    meal_count: int
    daily_goal: int | None


@dataclass(frozen=True)
class PeriodNutrition:
    """Per-day series over an inclusive date range."""

    start_date: date
    end_date: date
    daily: list[DailyTotals]
    total_calories: float
    total_protein_g: float
    total_carbs_g: float
    total_fat_g: float
    avg_calories: float
    daily_goal: int | None
