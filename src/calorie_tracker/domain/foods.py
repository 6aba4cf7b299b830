"""Domain models for the food catalog."""

from dataclasses import dataclass
from uuid import UUID

from calorie_tracker.domain.nutrition import MacroProfile


@dataclass(frozen=True)
class Food:
    """A catalog food with nutrient values per 100 units of its base serving."""

    id: UUID
    name: str
    calories: float
    protein_g: float
    carbs_g: float
    fat_g: float
    fiber_g: float | None = None
    sugar_g: float | None = None
    sodium_mg: float | None = None
    serving_size: float | None = None
    serving_unit: str | None = None
    category: str | None = None
    description: str | None = None
    locale_id: int | None = None
    user_id: UUID | None = None
    is_public: bool = False
    external_id: str | None = None

    @property
    def macros(self) -> MacroProfile:
        """Return the per-100 macro profile."""
        return MacroProfile(
            calories=self.calories,
            protein_g=self.protein_g,
            carbs_g=self.carbs_g,
            fat_g=self.fat_g,
        )

    def is_visible_to(self, user_id: UUID | None) -> bool:
        """Return True when the food is public or owned by the user."""
        return self.is_public or (user_id is not None and self.user_id == user_id)


@dataclass(frozen=True)
class FoodQuery:
    """Filters for catalog searches."""

    text: str | None = None
    category: str | None = None
    locale_id: int | None = None
    page: int = 1
    limit: int = 20


@dataclass(frozen=True)
class FoodPage:
    """One page of catalog search results."""

    foods: list[Food]
    total_count: int
    page: int
    total_pages: int
