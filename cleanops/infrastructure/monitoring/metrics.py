"""
Prometheus metrics for system monitoring.
"""

import os

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Histogram,
    generate_latest,
    multiprocess,
)

from cleanops.config.logging import get_logger

logger = get_logger(__name__)

registry = CollectorRegistry()
prometheus_multiproc_dir = os.getenv("PROMETHEUS_MULTIPROC_DIR")

if prometheus_multiproc_dir and os.path.isdir(prometheus_multiproc_dir):
    multiprocess.MultiProcessCollector(registry)
    logger.info(
        "Multiprocess metrics collector initialized", path=prometheus_multiproc_dir
    )


def get_registry() -> CollectorRegistry:
    """Get the registry metrics are recorded in."""
    return registry


def _get_metric(metric_class, *args, **kwargs):
    return metric_class(*args, **kwargs, registry=get_registry())


JOB_TRANSITIONS = _get_metric(
    Counter,
    "job_transitions_total",
    "Job lifecycle transitions applied",
    ["operation", "from_status", "to_status"],
)

JOB_TRANSITION_CONFLICTS = _get_metric(
    Counter,
    "job_transition_conflicts_total",
    "Conditional job updates that lost a race",
    ["operation"],
)

COMPLETION_CONFLICTS = _get_metric(
    Counter,
    "job_completion_conflicts_total",
    "Conflicts found when a cleaner completed a job",
    ["conflict_type"],
)

LINE_ITEMS_ACCRUED = _get_metric(
    Counter,
    "invoice_line_items_accrued_total",
    "Invoice line items appended for completed jobs",
    ["pay_type"],
)

MANAGER_OVERRIDES = _get_metric(
    Counter,
    "manager_overrides_total",
    "Manager overrides and conflict resolutions",
    ["action"],
)

INVOICE_TRANSITIONS = _get_metric(
    Counter,
    "invoice_transitions_total",
    "Invoice status changes",
    ["to_status"],
)

API_REQUEST_DURATION = _get_metric(
    Histogram,
    "api_request_duration_seconds",
    "Time spent processing API requests",
    ["method", "endpoint", "status_code"],
    buckets=[0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0],
)

ERRORS_TOTAL = _get_metric(
    Counter,
    "errors_total",
    "Total number of errors returned to clients",
    ["error_type"],
)


def record_job_transition(operation: str, from_status: str, to_status: str):
    """Record an applied job transition."""
    JOB_TRANSITIONS.labels(
        operation=operation, from_status=from_status, to_status=to_status
    ).inc()


def record_transition_conflict(operation: str):
    """Record a conditional update that matched no rows."""
    JOB_TRANSITION_CONFLICTS.labels(operation=operation).inc()


def record_completion_conflict(conflict_type: str):
    """Record a conflict found at completion."""
    COMPLETION_CONFLICTS.labels(conflict_type=conflict_type).inc()


def record_line_item_accrued(pay_type: str):
    """Record an invoice line item append."""
    LINE_ITEMS_ACCRUED.labels(pay_type=pay_type).inc()


def record_manager_override(action: str):
    """Record a manager override or resolution."""
    MANAGER_OVERRIDES.labels(action=action).inc()


def record_invoice_transition(to_status: str):
    """Record an invoice moving to a new status."""
    INVOICE_TRANSITIONS.labels(to_status=to_status).inc()


def record_api_request(method: str, endpoint: str, status_code: int, duration: float):
    """Record API request timing."""
    API_REQUEST_DURATION.labels(
        method=method, endpoint=endpoint, status_code=str(status_code)
    ).observe(duration)


def record_error(error_type: str):
    """Record error metric."""
    ERRORS_TOTAL.labels(error_type=error_type).inc()


def get_metrics():
    """Get all metrics in Prometheus format."""
    return generate_latest(registry)


def get_metrics_content_type():
    """Get the content type for metrics."""
    return CONTENT_TYPE_LATEST
