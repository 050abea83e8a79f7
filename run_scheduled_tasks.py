"""
Run the scheduled task creation job once.

Intended for an external cron trigger:
    python run_scheduled_tasks.py

Prints the run summary as JSON and exits non-zero if the due templates
could not be loaded.
"""

import asyncio
import json
import logging
import sys

from config import settings
from taskdesk.database import init_database, close_database
from taskdesk.scheduler.runner import ScheduledTaskRunner, ScheduleFetchError
from taskdesk.utils.background_tasks import drain_background_tasks

logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.StreamHandler(sys.stderr)
    ]
)

logger = logging.getLogger("run_scheduled_tasks")


async def main() -> int:
    if not await init_database():
        logger.error("Database unavailable, check DATABASE_URL")
        return 1

    try:
        summary = await ScheduledTaskRunner().run()
        print(json.dumps(summary.to_response(), indent=2))
        return 0
    except ScheduleFetchError as e:
        print(json.dumps({"error": str(e)}))
        return 1
    finally:
        # Let in-flight webhook notifications finish before the loop closes
        await drain_background_tasks(timeout=settings.notification_timeout_seconds)
        await close_database()


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
