"""User-facing notifications (toasts).

State transitions never present anything themselves; they hand a
``Notification`` to an injected ``Notifier``. ``ToastFeed`` is the default
notifier: it keeps the most recent notifications for the UI to drain.
"""

import logging
from collections import deque
from typing import Protocol

from mediconnect.models.notification import Notification, NotificationVariant

logger = logging.getLogger(__name__)


class Notifier(Protocol):
    """Anything that can present a notification."""

    def __call__(self, notification: Notification) -> None:
        ...


def success(title: str, description: str | None = None) -> Notification:
    """Build a regular notification."""
    return Notification(title=title, description=description)


def failure(title: str, description: str | None = None) -> Notification:
    """Build a destructive (failure) notification."""
    return Notification(
        title=title,
        description=description,
        variant=NotificationVariant.DESTRUCTIVE,
    )


class ToastFeed:
    """Bounded in-memory feed of notifications.

    Oldest notifications are dropped once ``max_items`` is reached.
    """

    def __init__(self, max_items: int = 50) -> None:
        self._items: deque[Notification] = deque(maxlen=max_items)

    def __call__(self, notification: Notification) -> None:
        if notification.is_failure:
            logger.warning(f"Notify: {notification.title} - {notification.description}")
        else:
            logger.info(f"Notify: {notification.title} - {notification.description}")
        self._items.append(notification)

    def __len__(self) -> int:
        return len(self._items)

    def peek(self) -> list[Notification]:
        """Return pending notifications without removing them."""
        return list(self._items)

    def drain(self) -> list[Notification]:
        """Return and remove all pending notifications, oldest first."""
        items = list(self._items)
        self._items.clear()
        return items
