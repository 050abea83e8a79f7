"""
Fire-and-forget background task execution.

Side-channel work (webhook notifications) runs detached from the caller:
- Errors are logged with stack traces and never propagate
- Task references are tracked to prevent GC
"""

import asyncio
import logging
from typing import Coroutine, Any

logger = logging.getLogger(__name__)

# Track active tasks to prevent garbage collection
_active_background_tasks: set = set()


async def safe_background_task(coro: Coroutine, task_name: str) -> Any:
    """
    Wrapper for background tasks with error handling.

    Args:
        coro: Coroutine to execute
        task_name: Human-readable task name for logging

    Returns:
        Result of the coroutine if successful, None on error
    """
    try:
        result = await coro
        logger.debug(f"Background task completed: {task_name}")
        return result
    except Exception as e:
        logger.error(
            f"Background task failed: {task_name} - {e}",
            exc_info=True
        )
        return None


def create_safe_task(coro: Coroutine, task_name: str) -> asyncio.Task:
    """
    Create a background task with error handling.

    Args:
        coro: Coroutine to execute
        task_name: Human-readable task name

    Returns:
        asyncio.Task object

    Example:
        task = create_safe_task(
            notifier.send_task_created(payload),
            "notify-task-42"
        )
    """
    task = asyncio.create_task(
        safe_background_task(coro, task_name)
    )

    # Store reference to prevent garbage collection
    _active_background_tasks.add(task)

    # Remove from tracking when done
    task.add_done_callback(_active_background_tasks.discard)

    logger.debug(f"Created safe background task: {task_name}")
    return task


def pending_background_tasks() -> int:
    """Number of background tasks still running."""
    return len(_active_background_tasks)


async def drain_background_tasks(timeout: float = 30.0) -> None:
    """
    Wait for outstanding background tasks, for processes about to exit.

    Tasks still running after the timeout are left alone; their outcome
    is only ever logged.
    """
    if not _active_background_tasks:
        return

    tasks = list(_active_background_tasks)
    logger.info(f"Waiting for {len(tasks)} background task(s)")
    _, pending = await asyncio.wait(tasks, timeout=timeout)
    if pending:
        logger.warning(f"{len(pending)} background task(s) still running after {timeout}s")
