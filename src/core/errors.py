"""Error taxonomy for the task service and its HTTP error body."""

from pydantic import BaseModel, Field


class ErrorCode:
    """Error codes for specific error conditions."""

    ERR_INVALID_ARGUMENT = "ERR_INVALID_ARGUMENT"
    ERR_TASK_NOT_FOUND = "ERR_TASK_NOT_FOUND"
    ERR_VERSION_CONFLICT = "ERR_VERSION_CONFLICT"
    ERR_VALIDATION_FAILED = "ERR_VALIDATION_FAILED"


class TaskServiceError(Exception):
    """Base class for caller-visible task service outcomes."""

    code: str = "ERR_UNKNOWN"


class InvalidArgumentError(TaskServiceError):
    """A required payload or precondition was missing or malformed."""

    code = ErrorCode.ERR_INVALID_ARGUMENT

    def __init__(self, message: str, *, field: str | None = None) -> None:
        super().__init__(message)
        self.field = field


class NotFoundError(TaskServiceError):
    """The referenced task does not exist."""

    code = ErrorCode.ERR_TASK_NOT_FOUND

    def __init__(self, task_id: int) -> None:
        super().__init__(f"Task not found: {task_id}")
        self.task_id = task_id


class VersionConflictError(TaskServiceError):
    """The expected version no longer matches the stored version.

    Both values are kept so the caller can re-fetch and retry with the
    current version.
    """

    code = ErrorCode.ERR_VERSION_CONFLICT

    def __init__(self, task_id: int, *, expected: int, actual: int) -> None:
        super().__init__(f"Version conflict. expected={expected}, actual={actual}")
        self.task_id = task_id
        self.expected = expected
        self.actual = actual


class Violation(BaseModel):
    """A single failed field check."""

    field: str
    message: str


class ErrorResponse(BaseModel):
    """Structured error body returned by the HTTP interface."""

    code: str
    message: str
    errors: list[Violation] = Field(default_factory=list)


def error_response(exc: TaskServiceError) -> ErrorResponse:
    """Build the HTTP error body for a task service error."""
    errors = []
    if isinstance(exc, InvalidArgumentError) and exc.field:
        errors.append(Violation(field=exc.field, message=str(exc)))
    return ErrorResponse(code=exc.code, message=str(exc), errors=errors)
