"""
Role and tenancy checks shared by the use cases.
"""

from uuid import UUID

from cleanops.application.interfaces.repositories import (
    JobRepositoryInterface,
    PropertyRepositoryInterface,
)
from cleanops.domain.entities.job import Job
from cleanops.domain.entities.property import Property
from cleanops.domain.entities.user import Actor
from cleanops.domain.exceptions.domain_error import ForbiddenError, NotFoundError


def require_manager(actor: Actor, operation: str) -> None:
    if not actor.is_manager():
        raise ForbiddenError(f"Only managers can {operation}")


def require_cleaner(actor: Actor, operation: str) -> None:
    if not actor.is_cleaner():
        raise ForbiddenError(f"Only cleaners can {operation}")


async def load_job(job_repo: JobRepositoryInterface, job_id: UUID, actor: Actor) -> Job:
    """Load a job of the actor's business; jobs of other businesses do not exist."""
    job = await job_repo.get_by_id(job_id)
    if not job or job.business_id != actor.business_id:
        raise NotFoundError("Job", job_id)
    return job


async def load_assigned_job(
    job_repo: JobRepositoryInterface, job_id: UUID, actor: Actor
) -> Job:
    """Load a job held by the actor."""
    job = await load_job(job_repo, job_id, actor)
    if not job.is_assigned_to(actor.id):
        raise NotFoundError("Job", job_id)
    return job


def can_view_job(job: Job, actor: Actor) -> bool:
    """Managers see the whole business, cleaners see the board and their own jobs."""
    if job.business_id != actor.business_id:
        return False
    if actor.is_manager():
        return True
    return job.assigned_cleaner_id is None or job.is_assigned_to(actor.id)


async def load_property(
    property_repo: PropertyRepositoryInterface, property_id: UUID, actor: Actor
) -> Property:
    property = await property_repo.get_by_id(property_id)
    if not property or property.business_id != actor.business_id:
        raise NotFoundError("Property", property_id)
    return property
