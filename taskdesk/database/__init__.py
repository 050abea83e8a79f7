"""
PostgreSQL database module for taskdesk.

Handles:
- Task storage, recurring templates and the instances created from them
- The user directory tasks are assigned against
"""

from .connection import (
    get_database,
    Database,
    init_database,
    close_database,
)
from .models import (
    Base,
    TaskDB,
    UserDB,
)

__all__ = [
    "get_database",
    "Database",
    "init_database",
    "close_database",
    "Base",
    "TaskDB",
    "UserDB",
]
