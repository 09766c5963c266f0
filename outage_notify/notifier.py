"""
Notification delivery contract.

Actual transport (SMTP, chat, etc.) belongs to the host application;
LoggingNotifier is the built-in implementation used by the admin CLI.
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterable

from .notifications import Notification

logger = logging.getLogger(__name__)


class Notifier(ABC):
    """Abstract base class for delivering notifications."""

    @abstractmethod
    def send(self, notification: Notification) -> None:
        """
        Deliver a single notification.

        Args:
            notification: Rendered notification to deliver

        Raises:
            Exception: If delivery fails
        """
        pass


class LoggingNotifier(Notifier):
    """Notifier that logs each notification and keeps a record of it."""

    def __init__(self):
        self.sent: list[Notification] = []

    def send(self, notification: Notification) -> None:
        logger.info(
            f"Notify {notification.recipient.email} about outage "
            f"{notification.outage_id}: {notification.subject}"
        )
        self.sent.append(notification)


def dispatch(notifications: Iterable[Notification], notifier: Notifier) -> int:
    """
    Send every notification, continuing past individual failures.

    Args:
        notifications: Notifications to send
        notifier: Delivery implementation

    Returns:
        Number of notifications sent successfully
    """
    sent = 0
    for notification in notifications:
        try:
            notifier.send(notification)
            sent += 1
        except Exception as e:
            logger.error(
                f"Failed to notify {notification.recipient.email} about outage "
                f"{notification.outage_id}: {e}",
                exc_info=True,
            )
    return sent
