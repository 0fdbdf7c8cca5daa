from __future__ import annotations


class WhiskeyServiceError(Exception):
    """Base class for every failure raised by the recommendation core."""


class NotFoundError(WhiskeyServiceError):
    """A referenced user, whiskey or tasting note does not exist."""


class RangeValidationError(WhiskeyServiceError, ValueError):
    """A numeric input is outside its declared range."""

    def __init__(self, field: str, value: object, low: float, high: float | None = None) -> None:
        self.field = field
        self.value = value
        self.low = low
        self.high = high
        if high is None:
            message = f"{field} must be >= {low}, got {value}"
        else:
            message = f"{field} must be between {low} and {high}, got {value}"
        super().__init__(message)


class EmptyResultError(WhiskeyServiceError):
    """A top-level recommend/similar/listing call matched nothing."""


class StorageError(WhiskeyServiceError):
    """An append or update to the catalog store did not apply."""
