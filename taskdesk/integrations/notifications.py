"""
Webhook notifications for tasks created from recurring templates.

Delivery is best-effort and at-most-once: no retries, and a failed post
is logged rather than raised.
"""

import asyncio
import logging
from typing import Optional

import aiohttp

from config import settings
from ..models.scheduling import TaskNotification

logger = logging.getLogger(__name__)


class WebhookNotifier:
    """Posts created-task documents to an external automation webhook."""

    def __init__(self, webhook_url: Optional[str] = None, timeout: Optional[float] = None):
        self.webhook_url = webhook_url if webhook_url is not None else settings.notification_webhook_url
        self.timeout = timeout if timeout is not None else settings.notification_timeout_seconds

    @property
    def enabled(self) -> bool:
        return bool(self.webhook_url)

    async def send_task_created(self, notification: TaskNotification) -> bool:
        """
        Post a created task to the webhook.

        Args:
            notification: The created task plus its assignee's name

        Returns:
            True if the webhook accepted the document
        """
        if not self.enabled:
            logger.debug(f"Notification webhook not configured, skipping task {notification.id}")
            return False

        try:
            async with aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.timeout)
            ) as session:
                async with session.post(
                    self.webhook_url,
                    json=notification.to_payload()
                ) as response:
                    if 200 <= response.status < 300:
                        logger.info(f"Webhook sent for task {notification.id}")
                        return True
                    else:
                        error = await response.text()
                        logger.error(f"Webhook error for task {notification.id}: {response.status} - {error}")
                        return False

        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.error(f"Error sending webhook for task {notification.id}: {e}")
            return False


# Singleton instance
_notifier: Optional[WebhookNotifier] = None


def get_webhook_notifier() -> WebhookNotifier:
    """Get the webhook notifier singleton."""
    global _notifier
    if _notifier is None:
        _notifier = WebhookNotifier()
    return _notifier
