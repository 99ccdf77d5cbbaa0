from datetime import datetime
from typing import Optional
from enum import Enum
from sqlmodel import Field, SQLModel
from pydantic import field_validator

from ..services.dates import to_local_naive

TITLE_MAX_LENGTH = 100


class TaskPriority(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


# Display rank: lower sorts first
PRIORITY_RANK = {
    TaskPriority.HIGH: 0,
    TaskPriority.MEDIUM: 1,
    TaskPriority.LOW: 2,
}


class Task(SQLModel):
    """A user-owned unit of work.

    Attributes:
        id: Store-assigned identifier, immutable
        user_id: Owner of the task
        title: Non-empty title, at most 100 characters
        description: Optional detailed description
        due_date: Optional due date and time (local, naive)
        completed: Whether the task is completed
        priority: Priority level (high, medium, low)
        category_id: Optional category, None means uncategorized
        reminder: Opt-in for due-soon notifications
        created_at: Timestamp when the task was created
    """

    id: int
    user_id: int
    title: str = Field(min_length=1, max_length=TITLE_MAX_LENGTH)
    description: Optional[str] = None
    due_date: Optional[datetime] = None
    completed: bool = False
    priority: TaskPriority = Field(default=TaskPriority.MEDIUM)
    category_id: Optional[int] = None
    reminder: bool = False
    created_at: datetime = Field(default_factory=datetime.now)

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("title cannot be empty")
        return v.strip()

    @field_validator("due_date", "created_at")
    @classmethod
    def localize(cls, v):
        return to_local_naive(v)
