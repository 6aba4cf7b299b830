"""Cache key builders shared by readers and the invalidation policy."""

from datetime import date
from uuid import UUID

from calorie_tracker.domain.foods import FoodQuery
from calorie_tracker.domain.locales import LocaleQuery
from calorie_tracker.domain.meals import MealQuery


def meal_key(meal_id: UUID, user_id: UUID) -> str:
    return f"meal:{meal_id}:user:{user_id}"


def user_meals_pattern(user_id: UUID) -> str:
    return f"meals:user:{user_id}:*"


def user_meals_key(user_id: UUID, query: MealQuery) -> str:
    return (
        f"meals:user:{user_id}:page{query.page}:limit{query.limit}"
        f":start{query.start_date or ''}:end{query.end_date or ''}"
        f":type{query.meal_type or ''}"
    )


def user_meals_by_date_key(user_id: UUID, day: date) -> str:
    return f"meals:user:{user_id}:date:{day.isoformat()}"


def daily_nutrition_key(user_id: UUID, day: date) -> str:
    return f"nutrition:daily:{user_id}:{day.isoformat()}"


def daily_nutrition_pattern(user_id: UUID) -> str:
    return f"nutrition:daily:{user_id}:*"


def weekly_nutrition_key(user_id: UUID, start: date, end: date) -> str:
    return f"nutrition:weekly:{user_id}:{start.isoformat()}:{end.isoformat()}"


def weekly_nutrition_pattern(user_id: UUID) -> str:
    return f"nutrition:weekly:{user_id}:*"


def monthly_nutrition_key(user_id: UUID, year: int, month: int) -> str:
    return f"nutrition:monthly:{user_id}:{year:04d}-{month:02d}"


def monthly_nutrition_pattern(user_id: UUID) -> str:
    return f"nutrition:monthly:{user_id}:*"


def user_profile_key(user_id: UUID) -> str:
    return f"user_profile:{user_id}"


def food_key(food_id: UUID, user_id: UUID | None) -> str:
    return f"food:{food_id}:user:{user_id or 'public'}"


def food_pattern(food_id: UUID) -> str:
    return f"food:{food_id}:*"


def user_foods_key(user_id: UUID, query: FoodQuery) -> str:
    return (
        f"foods:user:{user_id}:page{query.page}:limit{query.limit}"
        f":query{(query.text or '').lower()}:category{query.category or ''}"
        f":locale{query.locale_id or ''}"
    )


def user_foods_pattern(user_id: UUID) -> str:
    return f"foods:user:{user_id}:*"


def locale_key(locale_id: int) -> str:
    return f"locale:{locale_id}"


def locales_key(query: LocaleQuery) -> str:
    return (
        f"locales:page{query.page}:limit{query.limit}"
        f":query{(query.text or '').lower()}"
    )


def fdc_search_key(query: str, limit: int) -> str:
    return f"external:usda:search:{query.lower()}:{limit}"


def fdc_food_key(fdc_id: int) -> str:
    return f"external:usda:food:{fdc_id}"
