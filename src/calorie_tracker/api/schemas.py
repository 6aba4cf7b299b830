"""Pydantic request bodies for the HTTP API."""

from datetime import date, time
from uuid import UUID

from pydantic import BaseModel, Field

from calorie_tracker.domain.meals import (
    CLEARABLE_FIELDS,
    FoodLineInput,
    MealInput,
    MealUpdate,
)


class FoodLineRequest(BaseModel):
    """A food and its serving quantity in base units."""

    food_id: UUID
    quantity: float = Field(ge=0)

    def to_input(self) -> FoodLineInput:
        return FoodLineInput(food_id=self.food_id, quantity=self.quantity)


class MealCreateRequest(BaseModel):
    """Body of ``POST /meals``."""

    meal_type: str
    meal_date: date
    meal_time: time | None = None
    name: str | None = Field(default=None, max_length=255)
    notes: str | None = None
    foods: list[FoodLineRequest] = Field(default_factory=list)

    def to_input(self) -> MealInput:
        return MealInput(
            meal_type=self.meal_type,
            meal_date=self.meal_date,
            meal_time=self.meal_time,
            name=self.name,
            notes=self.notes,
            foods=[line.to_input() for line in self.foods],
        )


class MealUpdateRequest(BaseModel):
    """Body of ``PUT /meals/{meal_id}``.

    Omitted fields stay unchanged; an explicit null clears ``meal_time``,
    ``name`` or ``notes``.
    """

    meal_type: str | None = None
    meal_date: date | None = None
    meal_time: time | None = None
    name: str | None = Field(default=None, max_length=255)
    notes: str | None = None
    foods: list[FoodLineRequest] | None = None

    def to_update(self) -> MealUpdate:
        return MealUpdate(
            meal_type=self.meal_type,
            meal_date=self.meal_date,
            meal_time=self.meal_time,
            name=self.name,
            notes=self.notes,
            foods=(
                [line.to_input() for line in self.foods]
                if self.foods is not None
                else None
            ),
            cleared=frozenset(
                name
                for name in CLEARABLE_FIELDS & self.model_fields_set
                if getattr(self, name) is None
            ),
        )


class FoodCreateRequest(BaseModel):
    """Body of ``POST /foods``; nutrients are per 100 base units."""

    name: str = Field(min_length=1, max_length=255)
    calories: float = Field(ge=0)
    protein_g: float = Field(default=0.0, ge=0)
    carbs_g: float = Field(default=0.0, ge=0)
    fat_g: float = Field(default=0.0, ge=0)
    fiber_g: float | None = None
    sugar_g: float | None = None
    sodium_mg: float | None = None
    serving_size: float | None = None
    serving_unit: str | None = None
    category: str | None = None
    description: str | None = None
    locale_id: int | None = None


class FoodUpdateRequest(BaseModel):
    """Body of ``PUT /foods/{food_id}``."""

    name: str | None = Field(default=None, min_length=1, max_length=255)
    calories: float | None = Field(default=None, ge=0)
    protein_g: float | None = Field(default=None, ge=0)
    carbs_g: float | None = Field(default=None, ge=0)
    fat_g: float | None = Field(default=None, ge=0)
    fiber_g: float | None = None
    sugar_g: float | None = None
    sodium_mg: float | None = None
    serving_size: float | None = None
    serving_unit: str | None = None
    category: str | None = None
    description: str | None = None
    locale_id: int | None = None


class ProfileUpdateRequest(BaseModel):
    """Body of ``PUT /profile``."""

    daily_calorie_goal: int | None = Field(default=None, gt=0)
    height_cm: float | None = Field(default=None, gt=0)
    weight_kg: float | None = Field(default=None, gt=0)
    age: int | None = Field(default=None, gt=0)
    gender: str | None = None
    activity_level: str | None = None
