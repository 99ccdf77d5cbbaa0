"""Models package."""
from .task import Task, TaskPriority, PRIORITY_RANK
from .category import Category, DEFAULT_ICON
from .user import User
from .notification import Notification, NotificationType
from .events import NotificationEvent

__all__ = [
    "Task",
    "TaskPriority",
    "PRIORITY_RANK",
    "Category",
    "DEFAULT_ICON",
    "User",
    "Notification",
    "NotificationType",
    "NotificationEvent",
]

