import asyncio
import logging
import time
from dataclasses import dataclass, field
from typing import Callable, List, Literal, Optional
from uuid import uuid4

logger = logging.getLogger(__name__)

NotificationKind = Literal["success", "error", "info"]


@dataclass
class Notification:
    id: str
    message: str
    type: NotificationKind
    expires_at: float
    timer: Optional[asyncio.TimerHandle] = field(default=None, repr=False, compare=False)


class NotificationChannel:
    """
    Transient queue of user-facing messages.

    Every entry expires after `ttl_seconds`. Inside a running event loop the
    expiry is a scheduled dismiss() call; outside one, expired entries are
    dropped the next time the list is read. Both the timer and a manual
    dismissal go through dismiss(), which tolerates ids that are already gone.
    """

    def __init__(self, ttl_seconds: float = 3.0, clock: Callable[[], float] = time.monotonic):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._items: List[Notification] = []

    def notify(self, message: str, type: NotificationKind = "success") -> str:
        """Queue a message and schedule its removal. Returns the notification id."""
        notification_id = uuid4().hex[:9]
        timer = None
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            loop = None
        if loop is not None:
            timer = loop.call_later(self.ttl_seconds, self.dismiss, notification_id)

        self._items.append(Notification(
            id=notification_id,
            message=message,
            type=type,
            expires_at=self._clock() + self.ttl_seconds,
            timer=timer,
        ))
        log = logger.warning if type == "error" else logger.debug
        log(f"Notification [{type}]: {message}")
        return notification_id

    def dismiss(self, notification_id: str):
        """Remove a notification by id. No-op when it is already gone."""
        remaining = []
        for item in self._items:
            if item.id == notification_id:
                if item.timer is not None:
                    item.timer.cancel()
            else:
                remaining.append(item)
        self._items = remaining

    @property
    def notifications(self) -> List[Notification]:
        """Live notifications in the order they were raised."""
        now = self._clock()
        for item in [n for n in self._items if n.expires_at <= now]:
            self.dismiss(item.id)
        return list(self._items)

    def clear(self):
        for item in list(self._items):
            self.dismiss(item.id)
