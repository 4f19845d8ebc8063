"""
Validation-related domain exceptions.
"""

from .domain_error import DomainError


class ValidationError(DomainError):
    """Base exception for validation errors."""

    pass


class InvalidCoordinatesError(ValidationError):
    """Raised when a GPS reading is outside the valid latitude/longitude range."""

    def __init__(self, latitude: float, longitude: float):
        self.latitude = latitude
        self.longitude = longitude
        super().__init__(f"Invalid GPS coordinates ({latitude}, {longitude})")


class InvalidOverrideReasonError(ValidationError):
    """Raised when a manager override reason is missing or too short."""

    def __init__(self, min_length: int):
        self.min_length = min_length
        super().__init__(
            f"Override reason must be at least {min_length} characters"
        )
