"""Pagination helpers shared by list operations."""

from calorie_tracker.errors import ValidationFailure

MAX_PAGE_SIZE = 100


def validate_page(page: int, limit: int) -> None:
    """Raise ValidationFailure for out-of-range page parameters."""
    if page < 1:
        raise ValidationFailure("page must be at least 1")
    if not 1 <= limit <= MAX_PAGE_SIZE:
        raise ValidationFailure(f"limit must be between 1 and {MAX_PAGE_SIZE}")


def total_pages(total_count: int, limit: int) -> int:
    """Return the number of pages needed for total_count items."""
    return -(-total_count // limit)
