"""Nutrition domain models."""

from dataclasses import dataclass


@dataclass(frozen=True)
class MacroProfile:
    """Calories and macronutrients, either per 100 units or for a portion."""

    calories: float
    protein_g: float
    carbs_g: float
    fat_g: float


ZERO_MACROS = MacroProfile(calories=0.0, protein_g=0.0, carbs_g=0.0, fat_g=0.0)


@dataclass(frozen=True)
class FoodSummary:
    """Summary information about a food from FDC."""

    fdc_id: int
    description: str
    brand_owner: str | None
    brand_name: str | None
    data_type: str | None


@dataclass(frozen=True)
class FdcFoodDetails:
    """Full FDC food details with per-100 g nutrients."""

    summary: FoodSummary
    macros: MacroProfile
    fiber_g: float | None
    sugar_g: float | None
    sodium_mg: float | None
    serving_size: float | None
    serving_unit: str | None
