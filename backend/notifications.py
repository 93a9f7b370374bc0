# notifications.py
from __future__ import annotations

import queue
import threading
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable, Dict, Iterable, List, Optional

from celery_app import celery_app
from config import NOTIFICATION_CHANNEL, NOTIFICATION_POLL_SECONDS
from logging_config import get_logger

logger = get_logger("influencer_manager.notifications", component="notifications")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Notification:
    username: str
    message: str
    timestamp: datetime = field(default_factory=_utcnow)

    def __str__(self) -> str:
        return f"[{self.timestamp.isoformat()}] {self.username}: {self.message}"


Deliverer = Callable[[Notification], None]


def log_delivery(notification: Notification) -> None:
    logger.info(
        "notification_delivered",
        extra={"username": notification.username, "notification": notification.message},
    )


def celery_delivery(notification: Notification) -> None:
    celery_app.send_task(
        "tasks.deliver_notification",
        args=[notification.username, notification.message, notification.timestamp.isoformat()],
    )


def get_deliverer(channel: str) -> Deliverer:
    channel = (channel or "log").lower().strip()

    if channel == "log":
        return log_delivery
    if channel == "celery":
        return celery_delivery

    raise RuntimeError(f"Unsupported NOTIFICATION_CHANNEL: {channel}")


class NotificationService:
    """
    FIFO of outgoing notifications drained by one background thread.

    Producers call `add_notification` from any thread; `queue.Queue` does the
    synchronisation. The worker checks the `running` flag between iterations
    and sleeps `poll_seconds` whenever the queue is empty, so `stop()` is
    cooperative and takes effect within one poll interval.
    """

    def __init__(
        self,
        poll_seconds: float = NOTIFICATION_POLL_SECONDS,
        channel: str = NOTIFICATION_CHANNEL,
        deliver: Optional[Deliverer] = None,
    ):
        self.poll_seconds = poll_seconds
        self._deliver = deliver or get_deliverer(channel)
        self._queue: "queue.Queue[Notification]" = queue.Queue()
        self._history: Dict[str, List[str]] = {}
        self._thread: Optional[threading.Thread] = None
        self.running = False
        self.delivered_count = 0

    # ---------- producer side ----------
    def add_notification(self, username: str, message: str) -> Notification:
        notification = Notification(username=username, message=message)
        self._queue.put(notification)
        self._history.setdefault(username, []).append(message)
        logger.debug("notification_queued", extra={"username": username})
        return notification

    def send_bulk_notification(self, usernames: Iterable[str], message: str) -> int:
        count = 0
        for username in usernames:
            self.add_notification(username, message)
            count += 1
        return count

    def get_notifications_for_user(self, username: str) -> List[str]:
        return list(self._history.get(username, []))

    def clear_notifications_for_user(self, username: str) -> None:
        self._history.pop(username, None)
        logger.info("notifications_cleared", extra={"username": username})

    def mark_notifications_as_read(self, username: str) -> None:
        # no read-state is stored yet; recorded for the audit trail only
        logger.info("notifications_marked_read", extra={"username": username})

    @property
    def pending_count(self) -> int:
        return self._queue.qsize()

    @property
    def total_count(self) -> int:
        """Every notification still in some user's history. Queued ones are already recorded there."""
        return sum(len(v) for v in self._history.values())

    # ---------- consumer side ----------
    def _deliver_one(self) -> bool:
        try:
            notification = self._queue.get_nowait()
        except queue.Empty:
            return False

        try:
            self._deliver(notification)
            self.delivered_count += 1
        except Exception:
            # the worker outlives a failed delivery; the notification is dropped
            logger.exception("notification_delivery_failed", extra={"username": notification.username})
        finally:
            self._queue.task_done()
        return True

    def process_pending(self) -> int:
        """Drain the queue on the calling thread; returns how many were taken off."""
        drained = 0
        while self._deliver_one():
            drained += 1
        return drained

    def run(self) -> None:
        logger.info("notification_worker_started", extra={"poll_seconds": self.poll_seconds})
        while self.running:
            if not self._deliver_one():
                time.sleep(self.poll_seconds)
        logger.info("notification_worker_stopped", extra={"pending": self.pending_count})

    def start(self) -> None:
        if self._thread is not None and self._thread.is_alive():
            return
        self.running = True
        self._thread = threading.Thread(target=self.run, name="notification-worker", daemon=True)
        self._thread.start()

    def stop(self, join: bool = True, timeout: Optional[float] = None) -> None:
        self.running = False
        if join and self._thread is not None:
            self._thread.join(timeout)
        self._thread = None
