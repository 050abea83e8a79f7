"""External integrations."""

from .notifications import WebhookNotifier, get_webhook_notifier

__all__ = [
    "WebhookNotifier",
    "get_webhook_notifier",
]
