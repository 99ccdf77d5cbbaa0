from datetime import datetime
from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field


class NotificationType(str, Enum):
    REMINDER = "reminder"
    INFO = "info"
    SUCCESS = "success"
    ERROR = "error"


class Notification(BaseModel):
    """A transient, dismissible event shown to a user.

    Attributes:
        id: Unique per emission
        user_id: Recipient
        title: Short heading
        message: Human readable body
        type: reminder, info, success or error
        visible: False once dismissed; the record is purged shortly after
        source_task_id: Originating task for reminders (lookup only)
        created_at: Emission instant, used for duplicate suppression
        dismissed_at: When the notification was dismissed
    """

    id: str
    user_id: int
    title: str
    message: str
    type: NotificationType = NotificationType.INFO
    visible: bool = True
    source_task_id: Optional[int] = None
    created_at: datetime = Field(default_factory=datetime.now)
    dismissed_at: Optional[datetime] = None
