"""
Repository classes for database operations.

Each repository handles CRUD and queries for its entity type.
"""

from .tasks import TaskRepository, get_task_repository
from .users import UserRepository, get_user_repository

__all__ = [
    "TaskRepository",
    "get_task_repository",
    "UserRepository",
    "get_user_repository",
]
