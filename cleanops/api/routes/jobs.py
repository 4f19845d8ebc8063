"""Job lifecycle endpoints."""

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Query, status

from cleanops.api.dependencies import (
    ActorDep,
    ClockDep,
    GPSValidatorDep,
    InvoiceRepositoryDep,
    JobRepositoryDep,
    MediaRepositoryDep,
    PropertyRepositoryDep,
    TransactionalOutboxDep,
    TransactionServiceDep,
    UserRepositoryDep,
)
from cleanops.api.schemas.invoice import LineItemResponse
from cleanops.api.schemas.job import (
    AccessDeniedRequest,
    CompleteJobRequest,
    CompleteJobResponse,
    ConflictSchema,
    JobCreateRequest,
    JobResponse,
    ReassignJobRequest,
    StartJobRequest,
)
from cleanops.application.use_cases.accept_job import AcceptJobUseCase
from cleanops.application.use_cases.complete_job import CompleteJobUseCase
from cleanops.application.use_cases.create_job import CreateJobRequest, CreateJobUseCase
from cleanops.application.use_cases.list_jobs import GetJobUseCase, ListJobsUseCase
from cleanops.application.use_cases.reassign_job import (
    ReassignJobUseCase,
    ResetJobUseCase,
)
from cleanops.application.use_cases.report_access_denied import (
    ReportAccessDeniedUseCase,
)
from cleanops.application.use_cases.start_job import StartJobUseCase
from cleanops.domain.value_objects.job_status import JobStatus

router = APIRouter(prefix="/jobs", tags=["jobs"])


@router.post("", response_model=JobResponse, status_code=status.HTTP_201_CREATED)
async def create_job(
    job_data: JobCreateRequest,
    actor: ActorDep,
    job_repository: JobRepositoryDep,
    property_repository: PropertyRepositoryDep,
    outbox: TransactionalOutboxDep,
    transaction_service: TransactionServiceDep,
    clock: ClockDep,
):
    """Post a new job to the board (managers)."""
    use_case = CreateJobUseCase(
        job_repo=job_repository,
        property_repo=property_repository,
        publisher=outbox,
        transaction_service=transaction_service,
        clock=clock,
    )

    job = await use_case.execute(
        CreateJobRequest(
            property_id=job_data.property_id,
            price=job_data.price,
            cleaning_date=job_data.cleaning_date,
            instructions=job_data.instructions,
            pay_type_override=job_data.pay_type_override,
        ),
        actor,
    )
    return JobResponse.model_validate(job)


@router.get("", response_model=List[JobResponse])
async def list_jobs(
    actor: ActorDep,
    job_repository: JobRepositoryDep,
    status_filter: Optional[JobStatus] = Query(None, alias="status"),
    limit: int = Query(100, ge=1, le=500),
):
    """List jobs; cleaners only see the board and their own jobs."""
    jobs = await ListJobsUseCase(job_repository).execute(
        actor, status=status_filter, limit=limit
    )
    return [JobResponse.model_validate(job) for job in jobs]


@router.get("/{job_id}", response_model=JobResponse)
async def get_job(job_id: UUID, actor: ActorDep, job_repository: JobRepositoryDep):
    job = await GetJobUseCase(job_repository).execute(job_id, actor)
    return JobResponse.model_validate(job)


@router.post("/{job_id}/accept", response_model=JobResponse)
async def accept_job(
    job_id: UUID,
    actor: ActorDep,
    job_repository: JobRepositoryDep,
    outbox: TransactionalOutboxDep,
    transaction_service: TransactionServiceDep,
    clock: ClockDep,
):
    """Claim an available job. Only one cleaner can win."""
    use_case = AcceptJobUseCase(
        job_repo=job_repository,
        publisher=outbox,
        transaction_service=transaction_service,
        clock=clock,
    )
    job = await use_case.execute(job_id, actor)
    return JobResponse.model_validate(job)


@router.post("/{job_id}/start", response_model=JobResponse)
async def start_job(
    job_id: UUID,
    actor: ActorDep,
    job_repository: JobRepositoryDep,
    outbox: TransactionalOutboxDep,
    transaction_service: TransactionServiceDep,
    gps_validator: GPSValidatorDep,
    clock: ClockDep,
    body: Optional[StartJobRequest] = None,
):
    body = body or StartJobRequest()
    use_case = StartJobUseCase(
        job_repo=job_repository,
        publisher=outbox,
        transaction_service=transaction_service,
        gps_validator=gps_validator,
        clock=clock,
    )
    job = await use_case.execute(job_id, actor, body.latitude, body.longitude)
    return JobResponse.model_validate(job)


@router.post("/{job_id}/complete", response_model=CompleteJobResponse)
async def complete_job(
    job_id: UUID,
    actor: ActorDep,
    job_repository: JobRepositoryDep,
    property_repository: PropertyRepositoryDep,
    user_repository: UserRepositoryDep,
    invoice_repository: InvoiceRepositoryDep,
    media_repository: MediaRepositoryDep,
    outbox: TransactionalOutboxDep,
    transaction_service: TransactionServiceDep,
    gps_validator: GPSValidatorDep,
    clock: ClockDep,
    body: Optional[CompleteJobRequest] = None,
):
    """Finish a job. Conflicts send it to manager review instead of failing."""
    body = body or CompleteJobRequest()
    use_case = CompleteJobUseCase(
        job_repo=job_repository,
        property_repo=property_repository,
        user_repo=user_repository,
        invoice_repo=invoice_repository,
        photo_store=media_repository,
        publisher=outbox,
        transaction_service=transaction_service,
        gps_validator=gps_validator,
        clock=clock,
    )
    result = await use_case.execute(job_id, actor, body.latitude, body.longitude)

    return CompleteJobResponse(
        job=JobResponse.model_validate(result.job),
        needs_review=result.needs_review,
        conflicts=[ConflictSchema.model_validate(c) for c in result.conflicts],
        line_item=LineItemResponse.model_validate(result.line_item)
        if result.line_item
        else None,
    )


@router.post("/{job_id}/access-denied", response_model=JobResponse)
async def report_access_denied(
    job_id: UUID,
    actor: ActorDep,
    job_repository: JobRepositoryDep,
    outbox: TransactionalOutboxDep,
    transaction_service: TransactionServiceDep,
    gps_validator: GPSValidatorDep,
    clock: ClockDep,
    body: Optional[AccessDeniedRequest] = None,
):
    body = body or AccessDeniedRequest()
    use_case = ReportAccessDeniedUseCase(
        job_repo=job_repository,
        publisher=outbox,
        transaction_service=transaction_service,
        gps_validator=gps_validator,
        clock=clock,
    )
    job = await use_case.execute(job_id, actor, body.latitude, body.longitude)
    return JobResponse.model_validate(job)


@router.post("/{job_id}/reassign", response_model=JobResponse)
async def reassign_job(
    job_id: UUID,
    body: ReassignJobRequest,
    actor: ActorDep,
    job_repository: JobRepositoryDep,
    user_repository: UserRepositoryDep,
    outbox: TransactionalOutboxDep,
    transaction_service: TransactionServiceDep,
    clock: ClockDep,
):
    """Give a job to another cleaner, or to nobody."""
    use_case = ReassignJobUseCase(
        job_repo=job_repository,
        user_repo=user_repository,
        publisher=outbox,
        transaction_service=transaction_service,
        clock=clock,
    )
    job = await use_case.execute(job_id, body.cleaner_id, actor)
    return JobResponse.model_validate(job)


@router.post("/{job_id}/reset", response_model=JobResponse)
async def reset_job(
    job_id: UUID,
    actor: ActorDep,
    job_repository: JobRepositoryDep,
    outbox: TransactionalOutboxDep,
    transaction_service: TransactionServiceDep,
    clock: ClockDep,
):
    use_case = ResetJobUseCase(
        job_repo=job_repository,
        publisher=outbox,
        transaction_service=transaction_service,
        clock=clock,
    )
    job = await use_case.execute(job_id, actor)
    return JobResponse.model_validate(job)
