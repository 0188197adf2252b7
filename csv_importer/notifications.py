"""Notification sinks for importer status messages."""

from typing import List, Protocol

from csv_importer.logging_config import get_logger
from csv_importer.models import Notification

logger = get_logger(name=__name__)


class NotificationSink(Protocol):
    def notify(self, notification: Notification) -> None:
        """Deliver a notification; fire and forget."""
        ...


class LoggingNotificationSink:
    """Writes notifications to the application log."""

    def notify(self, notification: Notification) -> None:
        level = "INFO" if notification.variant == "success" else "WARNING"
        logger.log(level, "[{}] {}", notification.title, notification.message)


class CollectingNotificationSink(LoggingNotificationSink):
    """Logs notifications and buffers them until the host drains them."""

    def __init__(self) -> None:
        self._pending: List[Notification] = []

    def notify(self, notification: Notification) -> None:
        super().notify(notification)
        self._pending.append(notification)

    def drain(self) -> List[Notification]:
        pending, self._pending = self._pending, []
        return pending
