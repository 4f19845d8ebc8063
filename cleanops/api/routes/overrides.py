"""Manager review endpoints for jobs in needs_review."""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter

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
    ConflictCheckRequest,
    ConflictReportResponse,
    ConflictSchema,
    JobResponse,
    OverrideDetails,
    OverrideReasonRequest,
    OverrideResponse,
    ResolveConflictResponse,
)
from cleanops.application.use_cases.manager_overrides import (
    DetectConflictsUseCase,
    OverrideCompletionUseCase,
    ResolveConflictResult,
    ResolveGPSConflictUseCase,
    ResolvePhotoConflictUseCase,
)

router = APIRouter(prefix="/jobs", tags=["overrides"])


def _resolution_response(result: ResolveConflictResult) -> ResolveConflictResponse:
    return ResolveConflictResponse(
        job=JobResponse.model_validate(result.job),
        resolved=result.resolved.value,
        completed=result.completed,
        remaining_conflicts=[
            ConflictSchema.model_validate(c) for c in result.remaining_conflicts
        ],
        line_item=LineItemResponse.model_validate(result.line_item)
        if result.line_item
        else None,
    )


@router.post("/{job_id}/conflicts", response_model=ConflictReportResponse)
async def detect_conflicts(
    job_id: UUID,
    actor: ActorDep,
    job_repository: JobRepositoryDep,
    property_repository: PropertyRepositoryDep,
    media_repository: MediaRepositoryDep,
    gps_validator: GPSValidatorDep,
    body: Optional[ConflictCheckRequest] = None,
):
    """Dry run: what would block this job from completing now."""
    body = body or ConflictCheckRequest()
    use_case = DetectConflictsUseCase(
        job_repo=job_repository,
        property_repo=property_repository,
        photo_store=media_repository,
        gps_validator=gps_validator,
    )
    report = await use_case.execute(job_id, actor, body.latitude, body.longitude)
    return ConflictReportResponse(
        job_id=report.job_id,
        has_conflicts=report.has_conflicts,
        conflicts=[ConflictSchema.model_validate(c) for c in report.conflicts],
    )


@router.post("/{job_id}/override", response_model=OverrideResponse)
async def override_completion(
    job_id: UUID,
    body: OverrideReasonRequest,
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
):
    """Force-complete a job under review; the cleaner is paid for it."""
    use_case = OverrideCompletionUseCase(
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
    result = await use_case.execute(
        job_id, body.reason, actor, body.latitude, body.longitude
    )
    return OverrideResponse(
        job=JobResponse.model_validate(result.job),
        override=OverrideDetails.model_validate(result.override),
        line_item=LineItemResponse.model_validate(result.line_item)
        if result.line_item
        else None,
    )


@router.post("/{job_id}/resolve-gps", response_model=ResolveConflictResponse)
async def resolve_gps_conflict(
    job_id: UUID,
    body: OverrideReasonRequest,
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
):
    use_case = ResolveGPSConflictUseCase(
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
    result = await use_case.execute(
        job_id, body.reason, actor, body.latitude, body.longitude
    )
    return _resolution_response(result)


@router.post("/{job_id}/resolve-photos", response_model=ResolveConflictResponse)
async def resolve_photo_conflict(
    job_id: UUID,
    body: OverrideReasonRequest,
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
):
    use_case = ResolvePhotoConflictUseCase(
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
    result = await use_case.execute(job_id, body.reason, actor)
    return _resolution_response(result)
