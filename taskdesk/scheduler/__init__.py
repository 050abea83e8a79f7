"""Recurring task scheduling."""

from .recurrence import RecurrenceCalculator, calculate_next_scheduled_at
from .runner import ScheduledTaskRunner, ScheduleFetchError, run_scheduled_tasks

__all__ = [
    "RecurrenceCalculator",
    "calculate_next_scheduled_at",
    "ScheduledTaskRunner",
    "ScheduleFetchError",
    "run_scheduled_tasks",
]
