"""Collaborators the scoring engine talks to outside of storage."""

from .notifications import (
    CollectingNotifier,
    LoggingNotifier,
    Notification,
    Notifier,
)

__all__ = [
    "CollectingNotifier",
    "LoggingNotifier",
    "Notification",
    "Notifier",
]
