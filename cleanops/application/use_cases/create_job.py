"""Create job use case."""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional
from uuid import UUID

from cleanops.application.interfaces.repositories import (
    JobRepositoryInterface,
    PropertyRepositoryInterface,
)
from cleanops.application.interfaces.services import EventPublisherInterface
from cleanops.application.services.access_policy import load_property, require_manager
from cleanops.config.logging import get_logger
from cleanops.domain.clock import Clock, SystemClock
from cleanops.domain.entities.job import Job
from cleanops.domain.entities.user import Actor
from cleanops.domain.events import JobAvailable
from cleanops.domain.value_objects.pay_type import PayType
from cleanops.infrastructure.database.repositories.transaction_repository import (
    TransactionService,
)

logger = get_logger(__name__)


@dataclass
class CreateJobRequest:
    """Request for posting a job to the board."""

    property_id: UUID
    price: Decimal
    cleaning_date: Optional[date] = None
    instructions: Optional[str] = None
    pay_type_override: Optional[PayType] = None


class CreateJobUseCase:
    """Use case for posting a new available job for a property."""

    def __init__(
        self,
        job_repo: JobRepositoryInterface,
        property_repo: PropertyRepositoryInterface,
        publisher: EventPublisherInterface,
        transaction_service: TransactionService,
        clock: Optional[Clock] = None,
    ):
        self.job_repo = job_repo
        self.property_repo = property_repo
        self.publisher = publisher
        self.transaction_service = transaction_service
        self.clock = clock or SystemClock()

    async def execute(self, request: CreateJobRequest, actor: Actor) -> Job:
        require_manager(actor, "create jobs")

        async def operation() -> Job:
            property = await load_property(self.property_repo, request.property_id, actor)

            now = self.clock.now()
            job = await self.job_repo.create(
                Job(
                    business_id=actor.business_id,
                    property_id=property.id,
                    price=request.price,
                    cleaning_date=request.cleaning_date,
                    instructions=request.instructions,
                    pay_type_override=request.pay_type_override,
                    created_at=now,
                    updated_at=now,
                )
            )

            await self.publisher.publish(
                JobAvailable(
                    job_id=job.id,
                    business_id=job.business_id,
                    property_id=job.property_id,
                    price=job.price,
                    occurred_at=now,
                )
            )
            return job

        job = await self.transaction_service.execute_in_transaction(
            operation, name="create_job"
        )

        logger.info(
            "Job posted",
            job_id=str(job.id),
            property_id=str(job.property_id),
            price=str(job.price),
            manager_id=str(actor.id),
        )
        return job
