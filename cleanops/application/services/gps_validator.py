"""
GPS verification for job completion.

Distances use the Haversine great-circle formula on a spherical Earth.
"""

import math
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from cleanops.config.settings import settings
from cleanops.domain.exceptions.validation_error import InvalidCoordinatesError

EARTH_RADIUS_METERS = 6371000


def haversine_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """
    Calculate the great circle distance between two points on Earth.

    Args:
        lat1: Latitude of first point (degrees)
        lon1: Longitude of first point (degrees)
        lat2: Latitude of second point (degrees)
        lon2: Longitude of second point (degrees)

    Returns:
        Distance in meters
    """
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    delta_phi = math.radians(lat2 - lat1)
    delta_lambda = math.radians(lon2 - lon1)

    a = (
        math.sin(delta_phi / 2) ** 2
        + math.cos(phi1) * math.cos(phi2) * math.sin(delta_lambda / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

    return EARTH_RADIUS_METERS * c


def is_valid_latitude(value: Optional[float]) -> bool:
    return _is_number(value) and -90 <= value <= 90


def is_valid_longitude(value: Optional[float]) -> bool:
    return _is_number(value) and -180 <= value <= 180


def _is_number(value) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float, Decimal)):
        return False
    return math.isfinite(value)


def decimal_places(value: float) -> int:
    """Number of decimal digits in the shortest representation of value."""
    exponent = Decimal(repr(float(value))).as_tuple().exponent
    return max(0, -exponent)


@dataclass
class GPSValidationResult:
    """Outcome of a radius check."""

    valid: bool
    distance: float
    error: Optional[str] = None


class GPSValidator:
    """Validates completion coordinates against a property location."""

    def __init__(
        self,
        radius_meters: Optional[float] = None,
        min_decimal_places: Optional[int] = None,
    ):
        self.radius_meters = (
            radius_meters if radius_meters is not None else settings.GPS_RADIUS_METERS
        )
        self.min_decimal_places = (
            min_decimal_places
            if min_decimal_places is not None
            else settings.GPS_MIN_DECIMAL_PLACES
        )

    def validate_radius(
        self,
        property_lat: float,
        property_lng: float,
        cleaner_lat: float,
        cleaner_lng: float,
        radius_meters: Optional[float] = None,
    ) -> GPSValidationResult:
        """Check the cleaner's reading is within the allowed radius of the property."""
        radius = radius_meters if radius_meters is not None else self.radius_meters

        if not (
            is_valid_latitude(property_lat)
            and is_valid_longitude(property_lng)
            and is_valid_latitude(cleaner_lat)
            and is_valid_longitude(cleaner_lng)
        ):
            return GPSValidationResult(
                valid=False, distance=-1, error="Invalid GPS coordinates"
            )

        distance = haversine_distance(
            float(property_lat), float(property_lng), float(cleaner_lat), float(cleaner_lng)
        )

        if distance > radius:
            return GPSValidationResult(
                valid=False,
                distance=distance,
                error=(
                    f"GPS location is {int(distance + 0.5)}m away from property. "
                    f"Maximum allowed: {radius:g}m"
                ),
            )

        return GPSValidationResult(valid=True, distance=distance)

    def has_reasonable_precision(self, lat: float, lng: float) -> bool:
        """
        Reject obviously fabricated readings.

        (0, 0) and readings with fewer than the configured decimal places
        (4 decimals is roughly 11m) are rejected. This is a heuristic: a
        spoofed reading with enough digits passes.
        """
        if lat == 0 and lng == 0:
            return False

        return (
            decimal_places(lat) >= self.min_decimal_places
            and decimal_places(lng) >= self.min_decimal_places
        )

    def ensure_in_range(self, lat: float, lng: float) -> None:
        """Raise InvalidCoordinatesError for readings outside the valid range."""
        if not (is_valid_latitude(lat) and is_valid_longitude(lng)):
            raise InvalidCoordinatesError(lat, lng)
