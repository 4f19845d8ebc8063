"""
Use cases package.

This package contains the business logic use cases that orchestrate
the application services and repositories.
"""

from .accept_job import AcceptJobUseCase
from .complete_job import CompleteJobResult, CompleteJobUseCase
from .create_job import CreateJobRequest, CreateJobUseCase
from .invoices import (
    ApproveInvoiceUseCase,
    GetCurrentInvoiceUseCase,
    GetInvoiceDetailUseCase,
    GetInvoiceHistoryUseCase,
    MarkInvoicePaidUseCase,
    NoInvoice,
    SubmitInvoiceUseCase,
    VoidLineItemUseCase,
)
from .list_jobs import GetJobUseCase, ListJobsUseCase
from .manager_overrides import (
    DetectConflictsUseCase,
    OverrideCompletionUseCase,
    ResolveGPSConflictUseCase,
    ResolvePhotoConflictUseCase,
)
from .photos import DeletePhotoUseCase, ListJobPhotosUseCase, RecordPhotoUseCase
from .properties import (
    CreatePropertyRequest,
    CreatePropertyUseCase,
    DeletePropertyUseCase,
    GetPropertyUseCase,
    ListPropertiesUseCase,
    UpdatePropertyUseCase,
)
from .reassign_job import ReassignJobUseCase, ResetJobUseCase
from .report_access_denied import ReportAccessDeniedUseCase
from .start_job import StartJobUseCase

__all__ = [
    "AcceptJobUseCase",
    "ApproveInvoiceUseCase",
    "CompleteJobResult",
    "CompleteJobUseCase",
    "CreateJobRequest",
    "CreateJobUseCase",
    "CreatePropertyRequest",
    "CreatePropertyUseCase",
    "DeletePhotoUseCase",
    "DeletePropertyUseCase",
    "DetectConflictsUseCase",
    "GetCurrentInvoiceUseCase",
    "GetInvoiceDetailUseCase",
    "GetInvoiceHistoryUseCase",
    "GetJobUseCase",
    "GetPropertyUseCase",
    "ListJobPhotosUseCase",
    "ListJobsUseCase",
    "ListPropertiesUseCase",
    "MarkInvoicePaidUseCase",
    "NoInvoice",
    "OverrideCompletionUseCase",
    "ReassignJobUseCase",
    "RecordPhotoUseCase",
    "ReportAccessDeniedUseCase",
    "ResetJobUseCase",
    "ResolveGPSConflictUseCase",
    "ResolvePhotoConflictUseCase",
    "StartJobUseCase",
    "SubmitInvoiceUseCase",
    "UpdatePropertyUseCase",
    "VoidLineItemUseCase",
]
