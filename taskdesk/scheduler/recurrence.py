"""
Next-run calculation for recurring task templates.

All calculations are pure functions of the run's reference time, so one
run never reads the clock twice.
"""

import calendar
from datetime import datetime, timedelta
from typing import Optional

# Days 29-31 do not exist in every month; pinned days never go past this.
MAX_SCHEDULED_DAY = 28


class RecurrenceCalculator:
    """Calculate next due times for template frequencies."""

    # frequency -> months to advance
    MONTH_STEPS = {
        "monthly": 1,
        "quarterly": 3,
        "semi_annually": 6,
        "annually": 12,
    }

    @staticmethod
    def add_months(dt: datetime, months: int) -> datetime:
        """
        Move a datetime forward by calendar months, keeping the time of day.

        A day that does not exist in the target month is clamped to that
        month's last day (Jan 31 + 1 month -> Feb 28/29).
        """
        month_index = dt.month - 1 + months
        year = dt.year + month_index // 12
        month = month_index % 12 + 1
        last_day = calendar.monthrange(year, month)[1]
        return dt.replace(year=year, month=month, day=min(dt.day, last_day))

    @classmethod
    def pin_day(cls, dt: datetime, scheduled_day: Optional[int]) -> datetime:
        """
        Pin the day of month to the template's scheduled day, capped at 28.

        Zero, negative and missing days leave the date unpinned.
        """
        if not scheduled_day or scheduled_day < 1:
            return dt
        return dt.replace(day=min(scheduled_day, MAX_SCHEDULED_DAY))

    @classmethod
    def calculate_next_scheduled_at(
        cls,
        now: datetime,
        frequency: Optional[str],
        scheduled_day: Optional[int] = None,
    ) -> Optional[datetime]:
        """
        Calculate when a template is next due after a run at `now`.

        Args:
            now: The run's reference time
            frequency: One of the task frequency values
            scheduled_day: Optional day of month for month-based frequencies

        Returns:
            The next due time, or None when the template should go dormant
            (one_time, missing or unrecognized frequency)
        """
        # Accept TaskFrequency members as well as raw column values
        frequency = getattr(frequency, "value", frequency)

        if frequency == "daily":
            return now + timedelta(days=1)

        months = cls.MONTH_STEPS.get(frequency)
        if months is None:
            return None

        return cls.pin_day(cls.add_months(now, months), scheduled_day)

    @classmethod
    def is_recurring(cls, frequency: Optional[str]) -> bool:
        """Check if a frequency ever schedules a follow-up."""
        frequency = getattr(frequency, "value", frequency)
        return frequency == "daily" or frequency in cls.MONTH_STEPS


def calculate_next_scheduled_at(
    now: datetime,
    frequency: Optional[str],
    scheduled_day: Optional[int] = None,
) -> Optional[datetime]:
    """Module-level shortcut for RecurrenceCalculator.calculate_next_scheduled_at."""
    return RecurrenceCalculator.calculate_next_scheduled_at(now, frequency, scheduled_day)
