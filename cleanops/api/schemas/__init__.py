"""
API schemas for the cleaning operations service.
"""

from .common import BaseResponse, ErrorResponse, GPSReading
from .invoice import InvoiceResponse, LineItemResponse, VoidLineItemRequest
from .job import (
    CompleteJobRequest,
    CompleteJobResponse,
    JobCreateRequest,
    JobResponse,
    OverrideReasonRequest,
    OverrideResponse,
    ReassignJobRequest,
    ResolveConflictResponse,
)
from .photo import PhotoCreateRequest, PhotoResponse
from .property import PropertyCreateRequest, PropertyResponse, PropertyUpdateRequest

__all__ = [
    "BaseResponse",
    "CompleteJobRequest",
    "CompleteJobResponse",
    "ErrorResponse",
    "GPSReading",
    "InvoiceResponse",
    "JobCreateRequest",
    "JobResponse",
    "LineItemResponse",
    "OverrideReasonRequest",
    "OverrideResponse",
    "PhotoCreateRequest",
    "PhotoResponse",
    "PropertyCreateRequest",
    "PropertyResponse",
    "PropertyUpdateRequest",
    "ReassignJobRequest",
    "ResolveConflictResponse",
    "VoidLineItemRequest",
]
