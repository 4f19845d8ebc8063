"""
Pay type value object.
"""

from enum import Enum
from typing import Optional


class PayType(str, Enum):
    """How a cleaner is paid for a job."""

    HOURLY = "hourly"
    PER_JOB = "per_job"

    @classmethod
    def resolve(
        cls, override: Optional["PayType"], default: Optional["PayType"]
    ) -> "PayType":
        """Pick the job override, then the cleaner default, then per-job."""
        return override or default or cls.PER_JOB
