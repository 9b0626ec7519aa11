"""Update models for database operations."""

from datetime import date

from pydantic import BaseModel, Field, field_validator

from src.core.config import constants
from src.domain.create_models import validate_title_not_blank
from src.domain.task import TaskStatus


class TaskUpdate(BaseModel):
    """Full replacement content for a task; every field is rewritten."""

    title: str = Field(..., min_length=1, max_length=constants.TITLE_MAX_LENGTH)
    description: str | None = Field(default=None, max_length=constants.DESCRIPTION_MAX_LENGTH)
    status: TaskStatus
    due_date: date | None = None

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        """Validate title is not blank."""
        return validate_title_not_blank(v)
