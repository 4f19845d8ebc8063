"""
Cleaning Operations Service.

Job board, field verification and cleaner invoicing for cleaning businesses.
"""

__version__ = "0.1.0"
__description__ = "Cleaning Operations Service"

from .api import create_app
from .config import settings

__all__ = [
    "create_app",
    "settings",
]
