"""Due-soon reminders.

``ReminderScanner.scan`` picks tasks that are due within the lead time and
records one notification per task per de-duplication window in a
``NotificationCenter``. ``run_reminder_scanner`` is the polling loop that
feeds it from the store and pushes new notifications to the toast
listeners (the WebSocket channel in the running app).
"""

import asyncio
import inspect
import logging
import threading
import uuid
from datetime import datetime, timedelta
from typing import Any, Awaitable, Callable, Iterable, Optional, Union

from ..models import Notification, NotificationType, Task
from .dates import format_time_until

logger = logging.getLogger(__name__)

REMINDER_LEAD_TIME = timedelta(minutes=30)
DEDUPE_WINDOW = timedelta(minutes=15)
REMOVAL_DELAY = timedelta(milliseconds=300)

Listener = Callable[[Notification], Union[Awaitable[Any], Any]]


class NotificationCenter:
    """Tracks notifications until they are dismissed and purged.

    Dismissal only flips ``visible``; the record stays tracked (and still
    counts for duplicate suppression) until ``purge`` runs at least
    ``removal_delay`` later.
    """

    def __init__(self, removal_delay: timedelta = REMOVAL_DELAY):
        self.removal_delay = removal_delay
        self._notifications: list[Notification] = []
        self._listeners: list[Listener] = []
        # Reentrant: dismiss() looks the record up through get()
        self._lock = threading.RLock()

    def add(self, notification: Notification) -> Notification:
        with self._lock:
            self._notifications.append(notification)
        return notification

    def add_custom(
        self,
        user_id: int,
        title: str,
        message: str,
        type: NotificationType = NotificationType.INFO,
        now: Optional[datetime] = None,
    ) -> Notification:
        """Track a notification that did not come from a task reminder."""
        notification = Notification(
            id=f"manual-{uuid.uuid4().hex}",
            user_id=user_id,
            title=title,
            message=message,
            type=type,
            created_at=now or datetime.now(),
        )
        return self.add(notification)

    def get(self, notification_id: str) -> Optional[Notification]:
        with self._lock:
            for notification in self._notifications:
                if notification.id == notification_id:
                    return notification
        return None

    def dismiss(self, notification_id: str, now: Optional[datetime] = None) -> bool:
        """Hide a notification.

        Returns:
            True if a visible notification was hidden, False if it was unknown
            or already dismissed
        """
        with self._lock:
            notification = self.get(notification_id)
            if notification is None or not notification.visible:
                return False
            notification.visible = False
            notification.dismissed_at = now or datetime.now()
        return True

    def purge(self, now: Optional[datetime] = None) -> int:
        """Drop notifications dismissed at least ``removal_delay`` ago.

        Returns:
            Number of records removed
        """
        now = now or datetime.now()
        with self._lock:
            kept = [
                n for n in self._notifications
                if n.visible or n.dismissed_at is None
                or now - n.dismissed_at < self.removal_delay
            ]
            removed = len(self._notifications) - len(kept)
            self._notifications = kept
        return removed

    def active(self, user_id: Optional[int] = None) -> list[Notification]:
        """Visible notifications, oldest first."""
        with self._lock:
            return [
                n for n in self._notifications
                if n.visible and (user_id is None or n.user_id == user_id)
            ]

    def tracked(self) -> list[Notification]:
        """Every notification not yet purged, visible or not."""
        with self._lock:
            return list(self._notifications)

    def recently_notified(self, task_id: int, now: datetime, window: timedelta = DEDUPE_WINDOW) -> bool:
        with self._lock:
            return any(
                n.source_task_id == task_id and now - n.created_at < window
                for n in self._notifications
            )

    # --- Toast channel ---

    def add_listener(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: Listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    async def publish(self, notification: Notification) -> None:
        """Hand a notification to every listener.

        Fire and forget: a failing listener is logged and the rest still run.
        """
        for listener in list(self._listeners):
            try:
                result = listener(notification)
                if inspect.isawaitable(result):
                    await result
            except Exception:
                logger.exception("Notification listener failed for %s", notification.id)


class ReminderScanner:
    """Emits one reminder per task per de-duplication window.

    Attributes:
        center: Where emitted notifications are tracked
        lead_time: How far ahead of the due date a task becomes eligible
        dedupe_window: Minimum age of the last reminder before another is sent
    """

    def __init__(
        self,
        center: NotificationCenter,
        lead_time: timedelta = REMINDER_LEAD_TIME,
        dedupe_window: timedelta = DEDUPE_WINDOW,
    ):
        self.center = center
        self.lead_time = lead_time
        self.dedupe_window = dedupe_window

    def is_due_soon(self, task: Task, now: datetime) -> bool:
        if task.due_date is None or not task.reminder or task.completed:
            return False
        remaining = task.due_date - now
        return timedelta(0) < remaining <= self.lead_time

    def due_soon(self, tasks: Iterable[Task], now: datetime) -> list[Task]:
        """Tasks with reminders on, not completed, due within the lead time.

        A record that cannot be checked is skipped, never raised.
        """
        selected = []
        for task in tasks:
            try:
                if self.is_due_soon(task, now):
                    selected.append(task)
            except (AttributeError, TypeError):
                logger.debug("Skipping task without usable reminder fields: %r", task)
        return selected

    def build_notification(self, task: Task, now: datetime) -> Notification:
        message = f'Your task "{task.title}" is due in {format_time_until(task.due_date, now)}.'
        return Notification(
            id=f"task-{task.id}-{int(now.timestamp() * 1000)}",
            user_id=task.user_id,
            title="Task Reminder",
            message=message,
            type=NotificationType.REMINDER,
            source_task_id=task.id,
            created_at=now,
        )

    def scan(self, tasks: Iterable[Task], now: Optional[datetime] = None) -> list[Notification]:
        """Run one pass.

        Args:
            tasks: Task snapshot to inspect
            now: Reference instant (default: current time)

        Returns:
            Notifications created by this pass
        """
        now = now or datetime.now()
        self.center.purge(now)

        emitted = []
        for task in self.due_soon(tasks, now):
            if self.center.recently_notified(task.id, now, self.dedupe_window):
                continue
            notification = self.center.add(self.build_notification(task, now))
            logger.info("Reminder %s emitted for task %s", notification.id, task.id)
            emitted.append(notification)
        return emitted


async def run_reminder_scanner(
        storage,
        scanner: ReminderScanner,
        *,
        interval_seconds: float = 60.0,
        clock: Callable[[], datetime] = datetime.now,
) -> None:
    """Polling loop around ``ReminderScanner.scan``.

    Every interval_seconds:
    - read every user's tasks from the store
    - scan them for due-soon reminders
    - publish each new notification to the toast listeners

    A failing pass is logged and the loop carries on. To stop the loop,
    cancel the coroutine/task.
    """
    sleep_s = max(0.01, float(interval_seconds))

    while True:
        now = clock()
        try:
            emitted = []
            for user_id in storage.user_ids():
                emitted.extend(scanner.scan(storage.list_tasks(user_id), now))
            for notification in emitted:
                await scanner.center.publish(notification)
        except Exception:
            logger.exception("Reminder scan failed")

        await asyncio.sleep(sleep_s)
