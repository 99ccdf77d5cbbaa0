"""Response schemas for the derived views and notifications."""

from datetime import datetime
from typing import List
from pydantic import BaseModel, Field
from ..models import Task, NotificationType


class TaskStatsOut(BaseModel):
    total: int
    completed: int
    pending: int
    in_progress: int
    pending_percent: float
    in_progress_percent: float
    completed_percent: float


class TaskViewOut(BaseModel):
    """Visible tasks for a category + filter selection."""
    tasks: List[Task]
    stats: TaskStatsOut
    category_counts: dict[int, int]


class UpcomingScheduleOut(BaseModel):
    tomorrow_date: datetime
    next_week_date: datetime
    tomorrow: List[Task]
    next_week: List[Task]
    later: List[Task]


class NotificationCreate(BaseModel):
    """A custom notification added by the client."""
    title: str = Field(..., min_length=1)
    message: str
    type: NotificationType = NotificationType.INFO
