# Common utilities and shared modules
"""
Shared components used by the articles, validator and site packages:
- Project configuration
- Logging configuration
- Database utilities
"""

from .config import settings, PROJECT_ROOT, CONTENT_DIR, OUTPUT_DIR
from .database import get_connection, init_db
from .logging import setup_logging

__all__ = [
    "settings",
    "PROJECT_ROOT",
    "CONTENT_DIR",
    "OUTPUT_DIR",
    "get_connection",
    "init_db",
    "setup_logging",
]
