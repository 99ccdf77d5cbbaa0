"""Event schemas pushed over the toast channel."""

from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field


class NotificationEvent(BaseModel):
    """Event sent to connected clients when a notification is emitted.

    Attributes:
        type: Always "notification"
        data: Serialized Notification object
        user_id: Recipient
        timestamp: When the event was published
    """
    type: str = "notification"
    data: dict
    user_id: int
    timestamp: datetime = Field(default_factory=datetime.now)

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "type": "notification",
                "data": {
                    "id": "task-1-1767000000000",
                    "title": "Task Reminder",
                    "message": "Your task \"Finalize project proposal\" is due in 20 minutes.",
                    "type": "reminder",
                    "visible": True,
                    "source_task_id": 1,
                },
                "user_id": 1,
                "timestamp": "2025-12-29T15:40:00"
            }
        }
    )
