"""Task domain models and enums."""

from datetime import date, datetime
from enum import StrEnum

from pydantic import BaseModel, Field


class TaskStatus(StrEnum):
    """Task progress status."""

    OPEN = "OPEN"
    DOING = "DOING"
    DONE = "DONE"


class Task(BaseModel):
    """Task data transfer object, exactly as persisted."""

    id: int = Field(..., description="Unique task ID assigned by the database")
    title: str = Field(..., description="Task title")
    description: str | None = Field(default=None, description="Detailed task description")
    status: TaskStatus = Field(..., description="Current progress status")
    due_date: date | None = Field(default=None, description="Optional due date")
    version: int = Field(..., ge=0, description="Optimistic concurrency token, bumped on every update")
    created_at: datetime = Field(..., description="Creation timestamp (UTC)")
    updated_at: datetime = Field(..., description="Last update timestamp (UTC), set by the database")
