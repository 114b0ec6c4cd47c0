"""
Notification Channels

Notifier port, its channels and the fan-out reporter.
"""

from .base import Notifier, NotifierError, NotifierUnavailable
from .log_notifier import LogNotifier
from .redis_queue_notifier import RedisQueueNotifier
from .reporter import ReporterNotifier
from .webhook_notifier import WebhookNotifier

__all__ = [
    "Notifier",
    "NotifierError",
    "NotifierUnavailable",
    "LogNotifier",
    "RedisQueueNotifier",
    "ReporterNotifier",
    "WebhookNotifier",
]
