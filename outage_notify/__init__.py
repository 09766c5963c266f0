"""
Outage Notify module.

This module turns an outage's mailing list into rendered notifications
and hands them to a Notifier. Delivery transport is left to the host
application.

The notify layer depends on outage_common for the domain model and the
user directory contract.
"""

from .notifications import Notification, build_notifications, parse_mailing_list
from .notifier import LoggingNotifier, Notifier, dispatch

__all__ = [
    "LoggingNotifier",
    "Notification",
    "Notifier",
    "build_notifications",
    "dispatch",
    "parse_mailing_list",
]
