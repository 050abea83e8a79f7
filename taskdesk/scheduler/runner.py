"""
Scheduled task creation.

One run:
1. Selects every template whose next_scheduled_at has passed
2. Creates a task instance from each one
3. Notifies the webhook about each created task (fire-and-forget)
4. Advances each template's next_scheduled_at by its frequency

Failures are isolated per template. Only a failed due-template query
fails the whole run, and in that case nothing is written.
"""

import logging
from datetime import datetime
from typing import Optional, Dict, Any

from ..database.models import TaskDB
from ..database.repositories import get_task_repository, get_user_repository
from ..integrations.notifications import get_webhook_notifier
from ..models.scheduling import RunSummary, TaskNotification, UNKNOWN_USER_NAME
from ..utils.background_tasks import create_safe_task
from ..utils.datetime_utils import get_utc_now, to_naive_utc, to_iso_utc
from .recurrence import RecurrenceCalculator

logger = logging.getLogger(__name__)


class ScheduleFetchError(Exception):
    """The due-template query failed; the run did nothing."""
    pass


class ScheduledTaskRunner:
    """Materializes due recurring templates into task instances."""

    def __init__(self, task_repo=None, user_repo=None, notifier=None):
        self.task_repo = task_repo or get_task_repository()
        self.user_repo = user_repo or get_user_repository()
        self.notifier = notifier or get_webhook_notifier()

    async def run(self, now: Optional[datetime] = None) -> RunSummary:
        """
        Create task instances for every due template.

        Args:
            now: Reference time for the whole run; defaults to the current UTC time

        Returns:
            RunSummary with per-template error details

        Raises:
            ScheduleFetchError: If due templates could not be loaded
        """
        now = to_naive_utc(now) if now is not None else get_utc_now()
        logger.info(f"Starting scheduled task creation job at {to_iso_utc(now)}")

        try:
            templates = await self.task_repo.get_due_templates(now)
        except Exception as e:
            logger.error(f"Error fetching template tasks: {e}")
            raise ScheduleFetchError(str(e)) from e

        user_names = await self._load_user_names()

        logger.info(f"Found {len(templates)} template tasks to process")

        summary = RunSummary(timestamp=now, templates_processed=len(templates))

        for template in templates:
            try:
                await self._process_template(template, now, user_names, summary)
            except Exception as e:
                logger.error(f"Error processing template {template.id}: {e}", exc_info=True)
                summary.add_error(template.id, str(e))

        logger.info(
            f"Job completed: {summary.templates_processed} templates, "
            f"{summary.tasks_created} created, {summary.errors} errors"
        )
        return summary

    async def _load_user_names(self) -> Dict[Any, str]:
        """id -> name for every user. Missing names only degrade notifications."""
        try:
            directory = await self.user_repo.get_directory()
        except Exception as e:
            logger.error(f"Error fetching users: {e}")
            return {}

        return {user["id"]: user["name"] for user in directory if user.get("name")}

    async def _process_template(
        self,
        template: TaskDB,
        now: datetime,
        user_names: Dict[Any, str],
        summary: RunSummary,
    ) -> None:
        """
        Create one instance and advance its template.

        The instance counts as created as soon as the insert succeeds, even
        when the template update afterwards fails.
        """
        logger.info(f"Processing template task: {template.id} - {template.title}")

        try:
            created = await self.task_repo.create_instance(self.build_instance(template, now))
        except Exception as e:
            logger.error(f"Error creating task instance for template {template.id}: {e}")
            summary.add_error(template.id, str(e))
            return

        summary.tasks_created += 1
        logger.info(f"Created task instance: {created.id}")

        self._notify(created, user_names.get(created.user_id, UNKNOWN_USER_NAME))

        next_scheduled_at = RecurrenceCalculator.calculate_next_scheduled_at(
            now, template.frequency, template.scheduled_day
        )
        if next_scheduled_at:
            logger.info(f"Next scheduled at: {to_iso_utc(next_scheduled_at)}")
        else:
            logger.info(f"No next schedule for template {template.id} (one-time task)")

        try:
            await self.task_repo.update_schedule(
                template.id,
                last_created_at=now,
                next_scheduled_at=next_scheduled_at,
            )
        except Exception as e:
            logger.error(f"Error updating template {template.id}: {e}")
            summary.add_error(template.id, str(e))

    @staticmethod
    def build_instance(template: TaskDB, now: datetime) -> Dict[str, Any]:
        """Copy a template's business fields into a new instance row."""
        return {
            "user_id": template.user_id,
            "title": template.title,
            "description": template.description,
            "frequency": template.frequency,
            "scheduled_day": template.scheduled_day,
            "status": template.status,
            "chat_status": template.chat_status,
            "parent_task_id": template.id,
            "is_template": False,
            "created_at": now,
        }

    def _notify(self, task: TaskDB, user_name: str) -> None:
        """Dispatch the webhook without waiting for it."""
        try:
            notification = TaskNotification(
                id=task.id,
                title=task.title,
                description=task.description,
                user_id=task.user_id,
                user_name=user_name,
                frequency=task.frequency,
                scheduled_day=task.scheduled_day,
                status=task.status,
                created_at=task.created_at,
            )
            create_safe_task(
                self.notifier.send_task_created(notification),
                f"notify-task-{task.id}"
            )
        except Exception as e:
            logger.error(f"Error sending webhook for task {task.id}: {e}")


async def run_scheduled_tasks(now: Optional[datetime] = None) -> RunSummary:
    """Run the job once with the default repositories and notifier."""
    runner = ScheduledTaskRunner()
    return await runner.run(now)
