"""
Property API schemas.
"""

from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field, model_validator

from .common import TimestampMixin


class _Coordinates(BaseModel):
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)

    @model_validator(mode="after")
    def coordinates_together(self):
        if (self.latitude is None) != (self.longitude is None):
            raise ValueError("latitude and longitude must be given together")
        return self


class PropertyCreateRequest(_Coordinates):
    """Property creation request schema."""

    name: str = Field(..., min_length=1, max_length=255)
    address: Optional[str] = Field(None, max_length=1000)


class PropertyUpdateRequest(_Coordinates):
    """
    Partial property update.

    Omitted fields are left alone. Send latitude and longitude as null to
    remove the location.
    """

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    address: Optional[str] = Field(None, max_length=1000)


class PropertyResponse(TimestampMixin):
    """Property response schema."""

    id: UUID
    business_id: UUID
    name: str
    address: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None

    model_config = {"from_attributes": True}
