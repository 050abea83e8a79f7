"""
Scheduler manager for automated jobs.

Handles the scheduled jobs:
- Scheduled task creation (every SCHEDULED_TASKS_INTERVAL_MINUTES)
"""

import logging
from typing import Optional
from datetime import datetime
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from config import settings
from ..utils.datetime_utils import get_local_tz
from .runner import ScheduledTaskRunner, ScheduleFetchError

logger = logging.getLogger(__name__)


class SchedulerManager:
    """
    Manages all scheduled jobs for the task dashboard.
    """

    def __init__(self):
        self.scheduler: Optional[AsyncIOScheduler] = None
        self.timezone = get_local_tz()
        self.runner: Optional[ScheduledTaskRunner] = None

    def start(self) -> None:
        """Start the scheduler with all jobs."""
        self.scheduler = AsyncIOScheduler(timezone=self.timezone)

        # Overlapping runs could create duplicate instances, so the job never overlaps itself
        self.scheduler.add_job(
            self._scheduled_tasks_job,
            IntervalTrigger(minutes=settings.scheduled_tasks_interval_minutes),
            id="scheduled_tasks",
            name="Create Scheduled Tasks",
            replace_existing=True,
            max_instances=1,
            coalesce=True,
        )
        logger.info(f"Scheduled task creation every {settings.scheduled_tasks_interval_minutes} min")

        self.scheduler.start()
        logger.info("Scheduler started with all jobs")

    def stop(self) -> None:
        """Stop the scheduler."""
        if self.scheduler:
            self.scheduler.shutdown()
            logger.info("Scheduler stopped")

    async def _scheduled_tasks_job(self) -> None:
        """Create task instances from due templates."""
        logger.debug("Running scheduled tasks check")

        if self.runner is None:
            self.runner = ScheduledTaskRunner()

        try:
            summary = await self.runner.run()

            for detail in summary.error_details:
                logger.warning(f"Template {detail.template_id} failed: {detail.error}")

        except ScheduleFetchError as e:
            logger.error(f"Scheduled tasks job aborted, could not load templates: {e}")
        except Exception as e:
            logger.error(f"Error in scheduled tasks job: {e}", exc_info=True)

    def trigger_job(self, job_id: str) -> bool:
        """Manually trigger a job."""
        if not self.scheduler:
            return False

        job = self.scheduler.get_job(job_id)
        if job:
            job.modify(next_run_time=datetime.now(self.timezone))
            return True

        return False

    def get_job_status(self) -> dict:
        """Get status of all scheduled jobs."""
        if not self.scheduler:
            return {}

        jobs = {}
        for job in self.scheduler.get_jobs():
            jobs[job.id] = {
                "name": job.name,
                "next_run": job.next_run_time.isoformat() if job.next_run_time else None,
                "trigger": str(job.trigger)
            }

        return jobs


# Singleton instance
scheduler_manager = SchedulerManager()


def get_scheduler_manager() -> SchedulerManager:
    """Get the scheduler manager instance."""
    return scheduler_manager
