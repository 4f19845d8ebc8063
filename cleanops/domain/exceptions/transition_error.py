"""
Job lifecycle transition exceptions.
"""

from .domain_error import DomainError


class InvalidTransitionError(DomainError):
    """Raised when an operation is illegal from the job's current status."""

    def __init__(self, current_status: str, operation: str, message: str = None):
        self.current_status = current_status
        self.operation = operation
        super().__init__(
            message or f"Cannot {operation} a job with status '{current_status}'"
        )


class NoConflictToResolveError(InvalidTransitionError):
    """Raised when a narrow resolution targets a conflict the job does not have."""

    def __init__(self, job_id: object, conflict: str, message: str = None):
        self.job_id = job_id
        self.conflict = conflict
        super().__init__(
            "needs_review",
            f"resolve {conflict}",
            message or f"No {conflict} conflict to resolve for job {job_id}",
        )
