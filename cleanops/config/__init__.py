"""
Configuration package.
"""

from .logging import configure_logging, get_logger
from .settings import Settings, settings

__all__ = [
    "Settings",
    "settings",
    "configure_logging",
    "get_logger",
]
