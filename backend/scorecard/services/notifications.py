"""Report-message collaborators used by the scoring engine for error conditions."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Protocol

LOGGER = logging.getLogger(__name__)


class Notifier(Protocol):
    def notify(self, title: str, description: Optional[str] = None) -> None:
        ...


@dataclass(frozen=True)
class Notification:
    title: str
    description: Optional[str] = None


class LoggingNotifier:
    """Send every message to the log; the default when nothing is listening."""

    def notify(self, title: str, description: Optional[str] = None) -> None:
        if description:
            LOGGER.warning("%s: %s", title, description)
        else:
            LOGGER.warning("%s", title)


class CollectingNotifier:
    """Keep messages until the caller drains them, e.g. into an HTTP response."""

    def __init__(self) -> None:
        self._messages: List[Notification] = []

    def notify(self, title: str, description: Optional[str] = None) -> None:
        self._messages.append(Notification(title, description))

    @property
    def messages(self) -> List[Notification]:
        return list(self._messages)

    def drain(self) -> List[Notification]:
        messages, self._messages = self._messages, []
        return messages
