"""Process-wide store and notification singletons, exposed as FastAPI dependencies."""

from datetime import timedelta
from typing import Optional

from ..config import settings
from ..crud import MemStorage
from ..services.reminders import NotificationCenter, ReminderScanner

_storage: Optional[MemStorage] = None
_notification_center: Optional[NotificationCenter] = None
_reminder_scanner: Optional[ReminderScanner] = None


def get_storage() -> MemStorage:
    """Get or create the global store."""
    global _storage
    if _storage is None:
        _storage = MemStorage(seed=settings.seed_demo_data)
    return _storage


def get_notification_center() -> NotificationCenter:
    """Get or create the global notification center."""
    global _notification_center
    if _notification_center is None:
        _notification_center = NotificationCenter()
    return _notification_center


def get_reminder_scanner() -> ReminderScanner:
    """Get or create the global reminder scanner."""
    global _reminder_scanner
    if _reminder_scanner is None:
        _reminder_scanner = ReminderScanner(
            get_notification_center(),
            lead_time=timedelta(minutes=settings.reminder_lead_minutes),
            dedupe_window=timedelta(minutes=settings.reminder_dedupe_minutes),
        )
    return _reminder_scanner
