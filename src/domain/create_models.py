"""Pydantic models for creating records in database."""

from datetime import date

from pydantic import BaseModel, Field, field_validator

from src.core.config import constants
from src.domain.task import TaskStatus


def validate_title_not_blank(v: str) -> str:
    """Reject titles made only of whitespace."""
    if not v.strip():
        raise ValueError("Title cannot be blank")
    return v


class TaskCreate(BaseModel):
    """Pydantic model for creating a task record."""

    title: str = Field(..., min_length=1, max_length=constants.TITLE_MAX_LENGTH, description="Task title")
    description: str | None = Field(
        default=None,
        max_length=constants.DESCRIPTION_MAX_LENGTH,
        description="Detailed task description",
    )
    status: TaskStatus = Field(..., description="Initial progress status")
    due_date: date | None = Field(default=None, description="Optional due date (today or later)")

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        """Validate title is not blank."""
        return validate_title_not_blank(v)

    @field_validator("due_date")
    @classmethod
    def validate_due_date_not_past(cls, v: date | None) -> date | None:
        """Validate due date is today or in the future."""
        if v is not None and v < date.today():
            raise ValueError("Due date must not be in the past")
        return v
