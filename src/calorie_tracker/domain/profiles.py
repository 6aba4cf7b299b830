"""User profile domain models."""

from dataclasses import dataclass
from uuid import UUID

DEFAULT_AGE = 30
DEFAULT_GENDER = "male"

ACTIVITY_MULTIPLIERS = {
    "sedentary": 1.2,
    "lightly_active": 1.375,
    "moderately_active": 1.55,
    "very_active": 1.725,
    "extra_active": 1.9,
}


@dataclass(frozen=True)
class UserProfile:
    """Body metrics and the daily calorie goal of a user."""

    user_id: UUID
    daily_calorie_goal: int | None = None
    height_cm: float | None = None
    weight_kg: float | None = None
    age: int | None = None
    gender: str | None = None
    activity_level: str | None = None


def calculate_daily_calorie_goal(profile: UserProfile) -> int | None:
    """Estimate daily calories with Harris-Benedict BMR and an activity factor.

    Returns None when height or weight is missing.
    """
    if profile.height_cm is None or profile.weight_kg is None:
        return None
    age = profile.age if profile.age is not None else DEFAULT_AGE
    gender = (profile.gender or DEFAULT_GENDER).lower()
    if gender == "male":
        bmr = (
            88.362
            + 13.397 * profile.weight_kg
            + 4.799 * profile.height_cm
            - 5.677 * age
        )
    else:
        bmr = (
            447.593
            + 9.247 * profile.weight_kg
            + 3.098 * profile.height_cm
            - 4.330 * age
        )
    multiplier = ACTIVITY_MULTIPLIERS.get(profile.activity_level or "", 1.2)
    return round(bmr * multiplier)
