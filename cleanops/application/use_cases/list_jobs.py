"""Read-only job queries."""

from typing import List, Optional
from uuid import UUID

from cleanops.application.interfaces.repositories import JobRepositoryInterface
from cleanops.application.services.access_policy import can_view_job
from cleanops.domain.entities.job import Job
from cleanops.domain.entities.user import Actor
from cleanops.domain.exceptions.domain_error import NotFoundError
from cleanops.domain.value_objects.job_status import JobStatus


class ListJobsUseCase:
    """List the jobs an actor may see."""

    def __init__(self, job_repo: JobRepositoryInterface):
        self.job_repo = job_repo

    async def execute(
        self, actor: Actor, status: Optional[JobStatus] = None, limit: int = 100
    ) -> List[Job]:
        return await self.job_repo.list_for_business(
            actor.business_id,
            status=status,
            visible_to_cleaner_id=None if actor.is_manager() else actor.id,
            limit=limit,
        )


class GetJobUseCase:
    """Get a single job visible to the actor."""

    def __init__(self, job_repo: JobRepositoryInterface):
        self.job_repo = job_repo

    async def execute(self, job_id: UUID, actor: Actor) -> Job:
        job = await self.job_repo.get_by_id(job_id)
        if not job or not can_view_job(job, actor):
            raise NotFoundError("Job", job_id)
        return job
