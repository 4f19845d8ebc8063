"""
Completion conflict detection.
"""

from typing import List, Optional

from cleanops.application.services.gps_validator import GPSValidator
from cleanops.config.logging import get_logger
from cleanops.domain.entities.job import Job
from cleanops.domain.entities.property import Property
from cleanops.domain.value_objects.conflict import Conflict, ConflictType

logger = get_logger(__name__)


class ConflictDetector:
    """Decides whether a completion can be approved automatically."""

    def __init__(self, gps_validator: Optional[GPSValidator] = None):
        self.gps_validator = gps_validator or GPSValidator()

    def detect(
        self,
        job: Job,
        property: Property,
        photo_count: int,
        latitude: Optional[float],
        longitude: Optional[float],
    ) -> List[Conflict]:
        """
        Return the conflicts blocking automatic completion, in a stable order:
        photos, then at most one GPS conflict, then access.

        Conflicts a manager already resolved on this job are not reported again.
        """
        conflicts: List[Conflict] = []

        if photo_count <= 0 and not job.photo_conflict_resolved:
            conflicts.append(
                Conflict(
                    type=ConflictType.MISSING_PHOTOS,
                    message="No photos uploaded for this job",
                    photo_count=0,
                )
            )

        if not job.gps_conflict_resolved:
            gps_conflict = self._detect_gps_conflict(property, latitude, longitude)
            if gps_conflict:
                conflicts.append(gps_conflict)

        if job.access_denied:
            conflicts.append(
                Conflict(
                    type=ConflictType.ACCESS_DENIED,
                    message="Cleaner reported access denied",
                )
            )

        if conflicts:
            logger.info(
                "Completion conflicts detected",
                job_id=str(job.id),
                conflicts=[conflict.type.value for conflict in conflicts],
            )

        return conflicts

    def _detect_gps_conflict(
        self,
        property: Property,
        latitude: Optional[float],
        longitude: Optional[float],
    ) -> Optional[Conflict]:
        if not property.has_coordinates():
            return Conflict(
                type=ConflictType.GPS_INVALID,
                message="Property has no GPS coordinates on file",
            )

        if latitude is None or longitude is None:
            return Conflict(
                type=ConflictType.GPS_INVALID,
                message="No GPS reading recorded at completion",
            )

        result = self.gps_validator.validate_radius(
            property.latitude, property.longitude, latitude, longitude
        )
        if result.distance < 0:
            return Conflict(type=ConflictType.GPS_INVALID, message=result.error)

        if not self.gps_validator.has_reasonable_precision(latitude, longitude):
            return Conflict(
                type=ConflictType.GPS_PRECISION_LOW,
                message="GPS reading does not have enough precision",
            )

        if not result.valid:
            return Conflict(
                type=ConflictType.GPS_MISMATCH,
                message=result.error,
                distance=round(result.distance, 1),
            )

        return None
