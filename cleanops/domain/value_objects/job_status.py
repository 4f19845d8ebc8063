"""
Job status value object.
"""

from enum import Enum


class JobStatus(str, Enum):
    """Cleaning job lifecycle status enumeration."""

    AVAILABLE = "available"
    ACCEPTED = "accepted"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    NEEDS_REVIEW = "needs_review"

    def can_transition_to(self, target: "JobStatus") -> bool:
        """Check if the lifecycle allows moving from this status to target."""
        return target in _TRANSITIONS[self]

    def is_final(self) -> bool:
        """Check if status is final (no more transitions)."""
        return not _TRANSITIONS[self]

    def is_finished(self) -> bool:
        """Check if the cleaner has finished working the job."""
        return self in [JobStatus.COMPLETED, JobStatus.NEEDS_REVIEW]

    def allows_reassignment(self) -> bool:
        """Check if a manager may change the assigned cleaner."""
        return self not in [JobStatus.IN_PROGRESS, JobStatus.COMPLETED]


_TRANSITIONS = {
    JobStatus.AVAILABLE: frozenset({JobStatus.ACCEPTED}),
    JobStatus.ACCEPTED: frozenset({JobStatus.IN_PROGRESS, JobStatus.AVAILABLE}),
    JobStatus.IN_PROGRESS: frozenset({JobStatus.COMPLETED, JobStatus.NEEDS_REVIEW}),
    JobStatus.NEEDS_REVIEW: frozenset({JobStatus.COMPLETED, JobStatus.AVAILABLE}),
    JobStatus.COMPLETED: frozenset(),
}
