"""
API routes package.
"""

from .health import router as health_router
from .invoices import router as invoices_router
from .jobs import router as jobs_router
from .overrides import router as overrides_router
from .photos import router as photos_router
from .properties import router as properties_router

__all__ = [
    "health_router",
    "invoices_router",
    "jobs_router",
    "overrides_router",
    "photos_router",
    "properties_router",
]
