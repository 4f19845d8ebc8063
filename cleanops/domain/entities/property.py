"""
Property domain entity.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from cleanops.domain.exceptions.validation_error import ValidationError


@dataclass
class Property:
    """A cleanable property with its reference location."""

    business_id: UUID
    name: str
    id: UUID = field(default_factory=uuid4)
    address: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def __post_init__(self):
        if not self.name or not self.name.strip():
            raise ValidationError("Property name cannot be empty")

        # A half-set location cannot be verified against
        if (self.latitude is None) != (self.longitude is None):
            raise ValidationError("Property latitude and longitude must be set together")

    def has_coordinates(self) -> bool:
        """Check if GPS verification can be performed against this property."""
        return self.latitude is not None and self.longitude is not None
