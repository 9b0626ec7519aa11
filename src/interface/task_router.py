"""REST interface for tasks."""

import logging

from fastapi import APIRouter, FastAPI, Header, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from src.core.config import constants
from src.core.errors import (
    ErrorCode,
    ErrorResponse,
    InvalidArgumentError,
    NotFoundError,
    TaskServiceError,
    VersionConflictError,
    Violation,
    error_response,
)
from src.domain.create_models import TaskCreate
from src.domain.task import Task, TaskStatus
from src.domain.update_models import TaskUpdate
from src.models.service_models import TaskPage
from src.services import task_service


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/tasks", tags=["tasks"])

_STATUS_BY_ERROR: dict[type[TaskServiceError], int] = {
    InvalidArgumentError: constants.HTTP_BAD_REQUEST,
    NotFoundError: constants.HTTP_NOT_FOUND,
    VersionConflictError: constants.HTTP_CONFLICT,
}


def parse_if_match(value: str | None) -> int:
    """Parse an If-Match header carrying a task version.

    The version is sent as a bare integer; one pair of surrounding double
    quotes is tolerated. Versions are never negative, so a signed value such
    as ``-1`` is rejected here as malformed (400) rather than reported as a
    version conflict (409).

    Raises:
        InvalidArgumentError: If the header is missing or not a non-negative integer
    """
    if value is None or not value.strip():
        raise InvalidArgumentError("Missing required header: If-Match", field="If-Match")

    token = value.strip()
    if len(token) >= 2 and token[0] == token[-1] == '"':  # noqa: PLR2004
        token = token[1:-1]

    if not (token.isascii() and token.isdigit()):
        raise InvalidArgumentError(f"Invalid If-Match header: {value}", field="If-Match")
    return int(token)


@router.post("", status_code=constants.HTTP_CREATED)
async def create_task(payload: TaskCreate) -> Task:
    """Create a task."""
    return await task_service.create_task(data=payload)


@router.get("/{task_id}")
async def get_task(task_id: int) -> Task:
    """Fetch a task by id."""
    return await task_service.get_task(task_id=task_id)


@router.put("/{task_id}")
async def update_task(
    task_id: int,
    payload: TaskUpdate,
    response: Response,
    if_match: str | None = Header(default=None, alias="If-Match"),
) -> Task:
    """Replace a task's content; the new version is returned in the ETag header."""
    expected_version = parse_if_match(if_match)
    updated = await task_service.update_task(task_id=task_id, expected_version=expected_version, data=payload)
    # Bare integer, no quotes
    response.headers["ETag"] = str(updated.version)
    return updated


@router.delete("/{task_id}", status_code=constants.HTTP_NO_CONTENT)
async def delete_task(task_id: int) -> Response:
    """Delete a task."""
    await task_service.delete_task(task_id=task_id)
    return Response(status_code=constants.HTTP_NO_CONTENT)


@router.get("")
async def search_tasks(
    status: TaskStatus | None = None,
    q: str = "",
    page: int = 0,
    size: int = constants.DEFAULT_PAGE_SIZE,
) -> TaskPage:
    """Search tasks by status and title keyword, newest first."""
    return await task_service.search_tasks(status=status, keyword=q, page=page, size=size)


async def handle_task_service_error(request: Request, exc: TaskServiceError) -> JSONResponse:
    """Map task service errors to HTTP responses."""
    status_code = _STATUS_BY_ERROR.get(type(exc), constants.HTTP_BAD_REQUEST)
    logger.info(
        "task_request_rejected",
        extra={"path": request.url.path, "code": exc.code, "status_code": status_code},
    )
    return JSONResponse(status_code=status_code, content=error_response(exc).model_dump())


async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report request validation failures as 400 with one violation per field."""
    violations = []
    for error in exc.errors():
        loc = [str(part) for part in error.get("loc", ())]
        if loc and loc[0] in {"body", "query", "path", "header"}:
            loc = loc[1:]
        violations.append(Violation(field=".".join(loc), message=error.get("msg", "")))

    logger.info("task_request_invalid", extra={"path": request.url.path, "violations": len(violations)})
    body = ErrorResponse(code=ErrorCode.ERR_VALIDATION_FAILED, message="Invalid request", errors=violations)
    return JSONResponse(status_code=constants.HTTP_BAD_REQUEST, content=body.model_dump())


def register_exception_handlers(app: FastAPI) -> None:
    """Install the task error handlers on the application."""
    app.add_exception_handler(TaskServiceError, handle_task_service_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
