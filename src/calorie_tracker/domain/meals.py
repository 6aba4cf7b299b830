"""Domain models for meal logging."""

from dataclasses import dataclass
from datetime import date, time
from enum import StrEnum
from uuid import UUID

from calorie_tracker.errors import ValidationFailure


class MealType(StrEnum):
    """Closed set of meal classifications."""

    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    DINNER = "dinner"
    SNACK = "snack"


def parse_meal_type(value: object) -> MealType:
    """Return the meal type for a raw value or raise ValidationFailure."""
    if isinstance(value, MealType):
        return value
    if isinstance(value, str):
        try:
            return MealType(value.strip().lower())
        except ValueError:
            pass
    allowed = ", ".join(member.value for member in MealType)
    raise ValidationFailure(f"Invalid meal type {value!r}; expected one of {allowed}")


@dataclass(frozen=True)
class FoodLineInput:
    """A requested food line: which food and how much of it."""

    food_id: UUID
    quantity: float


@dataclass(frozen=True)
class MealInput:
    """Data needed to log a new meal."""

    meal_type: str
    meal_date: date
    foods: list[FoodLineInput]
    meal_time: time | None = None
    name: str | None = None
    notes: str | None = None


CLEARABLE_FIELDS = frozenset({"meal_time", "name", "notes"})


@dataclass(frozen=True)
class MealUpdate:
    """Partial meal update; None leaves a field unchanged.

    Optional fields named in ``cleared`` (``meal_time``, ``name``, ``notes``)
    are reset to None instead. When ``foods`` is given, the meal's lines are
    replaced wholesale and its totals recomputed.
    """

    meal_type: str | None = None
    meal_date: date | None = None
    meal_time: time | None = None
    name: str | None = None
    notes: str | None = None
    foods: list[FoodLineInput] | None = None
    cleared: frozenset[str] = frozenset()


@dataclass(frozen=True)
class MealFields:
    """Non-food columns of a meal row."""

    meal_type: MealType
    meal_date: date
    meal_time: time | None
    name: str | None
    notes: str | None


@dataclass(frozen=True)
class FoodLineSnapshot:
    """A food line with its scaled nutrients, ready to persist."""

    food_id: UUID
    food_name: str
    quantity: float
    calories: float
    protein_g: float
    carbs_g: float
    fat_g: float


@dataclass(frozen=True)
class MealFoodLine:
    """Persisted food line of a meal."""

    id: UUID
    meal_id: UUID
    food_id: UUID
    food_name: str
    quantity: float
    calories: float
    protein_g: float
    carbs_g: float
    fat_g: float


@dataclass(frozen=True)
class Meal:
    """A logged meal with its food lines and denormalized totals."""

    id: UUID
    user_id: UUID
    meal_type: MealType
    meal_date: date
    meal_time: time | None
    name: str | None
    notes: str | None
    total_calories: float
    total_protein_g: float
    total_carbs_g: float
    total_fat_g: float
    lines: list[MealFoodLine]

    @property
    def fields(self) -> MealFields:
        """Return the non-food columns of the meal."""
        return MealFields(
            meal_type=self.meal_type,
            meal_date=self.meal_date,
            meal_time=self.meal_time,
            name=self.name,
            notes=self.notes,
        )


@dataclass(frozen=True)
class MealQuery:
    """Filters for listing a user's meals."""

    page: int = 1
    limit: int = 20
    start_date: date | None = None
    end_date: date | None = None
    meal_type: MealType | None = None


@dataclass(frozen=True)
class MealPage:
    """One page of a user's meals."""

    meals: list[Meal]
    total_count: int
    page: int
    total_pages: int
