"""
Task repository.

Handles:
- Selecting recurring templates that are due
- Creating task instances from templates
- Advancing a template's schedule after a run
- Template listing and removal for the dashboard
"""

import logging
from typing import Optional, List, Dict, Any
from datetime import datetime

from sqlalchemy import select, update, delete

from ..connection import get_database
from ..models import TaskDB
from ..exceptions import (
    DatabaseConstraintError,
    DatabaseOperationError,
    EntityNotFoundError,
)
from ...utils.datetime_utils import get_utc_now
from sqlalchemy.exc import IntegrityError

logger = logging.getLogger(__name__)


class TaskRepository:
    """Repository for task operations."""

    def __init__(self):
        self.db = get_database()

    # ==================== RECURRENCE ====================

    async def get_due_templates(self, now: datetime) -> List[TaskDB]:
        """Get templates whose next_scheduled_at is at or before now."""
        async with self.db.session() as session:
            result = await session.execute(
                select(TaskDB).where(
                    TaskDB.is_template == True,
                    TaskDB.next_scheduled_at.is_not(None),
                    TaskDB.next_scheduled_at <= now,
                )
            )
            return list(result.scalars().all())

    async def create_instance(self, task_data: Dict[str, Any]) -> TaskDB:
        """Insert a task instance and return it with its assigned id."""
        parent_id = task_data.get("parent_task_id")

        async with self.db.session() as session:
            try:
                task = TaskDB(
                    user_id=task_data.get("user_id"),
                    title=task_data.get("title"),
                    description=task_data.get("description"),
                    frequency=task_data.get("frequency"),
                    scheduled_day=task_data.get("scheduled_day"),
                    status=task_data.get("status"),
                    chat_status=task_data.get("chat_status"),
                    parent_task_id=parent_id,
                    is_template=False,
                    created_at=task_data.get("created_at") or get_utc_now(),
                )
                session.add(task)
                await session.flush()

                logger.info(f"Created task instance {task.id} from template {parent_id}")
                return task

            except IntegrityError as e:
                logger.error(f"Constraint violation creating instance of template {parent_id}: {e}")
                raise DatabaseConstraintError(
                    f"Cannot create instance of template {parent_id}: constraint violation"
                )

            except Exception as e:
                logger.error(f"CRITICAL: Instance creation failed for template {parent_id}: {e}", exc_info=True)
                raise DatabaseOperationError(f"Failed to create instance of template {parent_id}: {e}")

    async def update_schedule(
        self,
        task_id: int,
        last_created_at: datetime,
        next_scheduled_at: Optional[datetime],
    ) -> TaskDB:
        """Record a run on a template and set (or clear) its next due time."""
        async with self.db.session() as session:
            try:
                await session.execute(
                    update(TaskDB)
                    .where(TaskDB.id == task_id)
                    .values(
                        last_created_at=last_created_at,
                        next_scheduled_at=next_scheduled_at,
                    )
                )

                result = await session.execute(
                    select(TaskDB).where(TaskDB.id == task_id)
                )
                task = result.scalar_one_or_none()

                if not task:
                    raise EntityNotFoundError(f"Template {task_id} not found for update")

                return task

            except EntityNotFoundError:
                raise

            except Exception as e:
                logger.error(f"CRITICAL: Schedule update failed for template {task_id}: {e}", exc_info=True)
                raise DatabaseOperationError(f"Failed to update template {task_id}: {e}")

    # ==================== TEMPLATES ====================

    async def create_template(self, task_data: Dict[str, Any]) -> TaskDB:
        """Create a recurring template. It is due immediately unless told otherwise."""
        async with self.db.session() as session:
            try:
                task = TaskDB(
                    user_id=task_data.get("user_id"),
                    title=task_data.get("title"),
                    description=task_data.get("description"),
                    frequency=task_data.get("frequency", "one_time"),
                    scheduled_day=task_data.get("scheduled_day"),
                    status=task_data.get("status", "pending"),
                    chat_status=task_data.get("chat_status"),
                    is_template=True,
                    next_scheduled_at=task_data.get("next_scheduled_at") or get_utc_now(),
                    created_at=get_utc_now(),
                )
                session.add(task)
                await session.flush()

                logger.info(f"Created template {task.id} ({task.frequency})")
                return task

            except IntegrityError as e:
                logger.error(f"Constraint violation creating template: {e}")
                raise DatabaseConstraintError(
                    f"Cannot create template for user {task_data.get('user_id')}: constraint violation"
                )

            except Exception as e:
                logger.error(f"CRITICAL: Template creation failed: {e}", exc_info=True)
                raise DatabaseOperationError(f"Failed to create template: {e}")

    async def get_by_id(self, task_id: int) -> Optional[TaskDB]:
        """Get a task by primary key."""
        async with self.db.session() as session:
            result = await session.execute(
                select(TaskDB).where(TaskDB.id == task_id)
            )
            return result.scalar_one_or_none()

    async def get_templates(self, recurring_only: bool = False) -> List[TaskDB]:
        """Get templates, newest first. recurring_only drops one-time templates."""
        query = select(TaskDB).where(TaskDB.is_template == True)
        if recurring_only:
            query = query.where(TaskDB.frequency != "one_time")

        async with self.db.session() as session:
            result = await session.execute(
                query.order_by(TaskDB.created_at.desc())
            )
            return list(result.scalars().all())

    async def get_instances(self, parent_task_id: int) -> List[TaskDB]:
        """Get the instances created from a template, newest first."""
        async with self.db.session() as session:
            result = await session.execute(
                select(TaskDB)
                .where(TaskDB.parent_task_id == parent_task_id)
                .order_by(TaskDB.created_at.desc())
            )
            return list(result.scalars().all())

    async def delete(self, task_id: int) -> bool:
        """Delete a task. Instances of a deleted template are kept and detached."""
        async with self.db.session() as session:
            try:
                result = await session.execute(
                    select(TaskDB).where(TaskDB.id == task_id)
                )
                task = result.scalar_one_or_none()

                if not task:
                    raise EntityNotFoundError(f"Task {task_id} not found for deletion")

                await session.execute(
                    update(TaskDB)
                    .where(TaskDB.parent_task_id == task_id)
                    .values(parent_task_id=None)
                )
                await session.execute(
                    delete(TaskDB).where(TaskDB.id == task_id)
                )

                logger.info(f"Deleted task {task_id}")
                return True

            except EntityNotFoundError:
                raise

            except Exception as e:
                logger.error(f"CRITICAL: Task deletion failed for {task_id}: {e}", exc_info=True)
                raise DatabaseOperationError(f"Failed to delete task {task_id}: {e}")


# Singleton
_task_repo: Optional[TaskRepository] = None


def get_task_repository() -> TaskRepository:
    """Get the task repository singleton."""
    global _task_repo
    if _task_repo is None:
        _task_repo = TaskRepository()
    return _task_repo
