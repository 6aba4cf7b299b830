"""Error types raised by calorie tracker services."""


class CalorieTrackerError(Exception):
    """Base class for application errors."""


class NotFoundError(CalorieTrackerError):
    """A meal, food, food line or profile does not exist for the caller."""


class ValidationFailure(CalorieTrackerError):
    """Input was rejected before touching the store."""


class TransactionFailure(CalorieTrackerError):
    """A store write was aborted and rolled back."""


class CacheUnavailable(CalorieTrackerError):
    """The cache backend could not be reached."""
