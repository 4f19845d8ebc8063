"""
Completion conflict value objects.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional


class ConflictType(str, Enum):
    """Reasons a completion is routed to manager review."""

    GPS_MISMATCH = "gps_mismatch"
    GPS_PRECISION_LOW = "gps_precision_low"
    GPS_INVALID = "gps_invalid"
    MISSING_PHOTOS = "missing_photos"
    ACCESS_DENIED = "access_denied"

    def is_gps(self) -> bool:
        """Check if the conflict comes from GPS verification."""
        return self in [
            ConflictType.GPS_MISMATCH,
            ConflictType.GPS_PRECISION_LOW,
            ConflictType.GPS_INVALID,
        ]


@dataclass(frozen=True)
class Conflict:
    """A single reason a completion cannot be auto-approved."""

    type: ConflictType
    message: str
    distance: Optional[float] = None
    photo_count: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert conflict to a plain dictionary."""
        data: Dict[str, Any] = {"type": self.type.value, "message": self.message}
        if self.distance is not None:
            data["distance"] = self.distance
        if self.photo_count is not None:
            data["photo_count"] = self.photo_count
        return data
