"""Utility modules for taskdesk."""

from .datetime_utils import (
    get_local_tz,
    get_utc_now,
    to_naive_utc,
    to_iso_utc,
)

from .background_tasks import (
    create_safe_task,
    drain_background_tasks,
    pending_background_tasks,
)

__all__ = [
    # Datetime utilities
    "get_local_tz",
    "get_utc_now",
    "to_naive_utc",
    "to_iso_utc",
    # Background tasks
    "create_safe_task",
    "drain_background_tasks",
    "pending_background_tasks",
]
