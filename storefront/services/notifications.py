"""User-facing notifications that expire on their own or can be dismissed"""

import time
import uuid
from dataclasses import dataclass
from enum import Enum
from typing import Callable


class NotificationLevel(str, Enum):
    """Kind of notification"""
    SUCCESS = "success"
    ERROR = "error"


@dataclass
class Notification:
    """A message shown to the shopper"""
    id: str
    message: str
    level: NotificationLevel
    created_at: float
    expires_at: float

    def is_expired(self, now: float) -> bool:
        return now >= self.expires_at


class NotificationCenter:
    """Holds active notifications for the UI to display"""

    def __init__(
        self,
        error_ttl: float = 5.0,
        success_ttl: float = 3.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._ttl = {
            NotificationLevel.ERROR: error_ttl,
            NotificationLevel.SUCCESS: success_ttl,
        }
        self._clock = clock
        self._items: dict[str, Notification] = {}

    def post(self, message: str, level: NotificationLevel = NotificationLevel.ERROR) -> Notification:
        """Add a notification"""
        now = self._clock()
        notification = Notification(
            id=uuid.uuid4().hex,
            message=message,
            level=level,
            created_at=now,
            expires_at=now + self._ttl[level],
        )
        self._items[notification.id] = notification
        return notification

    def success(self, message: str) -> Notification:
        return self.post(message, NotificationLevel.SUCCESS)

    def error(self, message: str) -> Notification:
        return self.post(message, NotificationLevel.ERROR)

    def active(self) -> list[Notification]:
        """Get non-expired notifications, oldest first"""
        now = self._clock()
        for key in [k for k, n in self._items.items() if n.is_expired(now)]:
            del self._items[key]
        return sorted(self._items.values(), key=lambda n: n.created_at)

    def dismiss(self, notification_id: str) -> bool:
        """Remove a notification"""
        return self._items.pop(notification_id, None) is not None
