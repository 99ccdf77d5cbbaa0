from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field, field_validator
from ..models import TaskPriority
from ..models.task import TITLE_MAX_LENGTH
from ..services.dates import to_local_naive


class TaskCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=TITLE_MAX_LENGTH)
    description: Optional[str] = None
    due_date: Optional[datetime] = None
    completed: bool = False
    priority: TaskPriority = TaskPriority.MEDIUM
    category_id: Optional[int] = None
    reminder: bool = False
    # id, user_id and created_at are assigned by the server

    @field_validator("title")
    @classmethod
    def title_not_empty(cls, v):
        if not v.strip():
            raise ValueError("title cannot be empty")
        return v.strip()

    @field_validator("due_date")
    @classmethod
    def due_date_local(cls, v):
        return to_local_naive(v)


class TaskUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=TITLE_MAX_LENGTH)
    description: Optional[str] = None
    due_date: Optional[datetime] = None
    completed: Optional[bool] = None
    priority: Optional[TaskPriority] = None
    category_id: Optional[int] = None
    reminder: Optional[bool] = None

    @field_validator("title", "completed", "priority", "reminder")
    @classmethod
    def not_null(cls, v, info):
        # Only runs for values the client actually sent
        if v is None:
            raise ValueError(f"{info.field_name} cannot be null")
        return v

    @field_validator("title")
    @classmethod
    def title_not_empty(cls, v):
        if not v.strip():
            raise ValueError("title cannot be empty")
        return v.strip()

    @field_validator("due_date")
    @classmethod
    def due_date_local(cls, v):
        return to_local_naive(v)
