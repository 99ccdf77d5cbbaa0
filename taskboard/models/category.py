from sqlmodel import Field, SQLModel
from pydantic import field_validator

DEFAULT_ICON = "list-check"


class Category(SQLModel):
    """A user-defined label grouping tasks, carrying a display icon."""

    id: int
    user_id: int
    name: str = Field(min_length=1)
    icon: str = DEFAULT_ICON

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("name cannot be empty")
        return v.strip()
