"""Unit tests for the error taxonomy."""

import pytest

from src.core.errors import (
    ErrorCode,
    ErrorResponse,
    InvalidArgumentError,
    NotFoundError,
    TaskServiceError,
    VersionConflictError,
    error_response,
)


@pytest.mark.unit
class TestTaskServiceErrors:
    """Tests for the task service exception classes."""

    def test_not_found_message_names_id(self):
        exc = NotFoundError(42)

        assert str(exc) == "Task not found: 42"
        assert exc.task_id == 42
        assert exc.code == ErrorCode.ERR_TASK_NOT_FOUND

    def test_version_conflict_carries_both_versions(self):
        exc = VersionConflictError(7, expected=2, actual=3)

        assert str(exc) == "Version conflict. expected=2, actual=3"
        assert exc.task_id == 7
        assert exc.expected == 2
        assert exc.actual == 3
        assert exc.code == ErrorCode.ERR_VERSION_CONFLICT

    def test_invalid_argument_keeps_field(self):
        exc = InvalidArgumentError("Missing required header: If-Match", field="If-Match")

        assert exc.field == "If-Match"
        assert exc.code == ErrorCode.ERR_INVALID_ARGUMENT

    @pytest.mark.parametrize(
        "exc",
        [
            InvalidArgumentError("bad"),
            NotFoundError(1),
            VersionConflictError(1, expected=0, actual=1),
        ],
    )
    def test_all_share_base_class(self, exc):
        assert isinstance(exc, TaskServiceError)


@pytest.mark.unit
class TestErrorResponse:
    """Tests for error_response function."""

    def test_conflict_response(self):
        response = error_response(VersionConflictError(1, expected=0, actual=1))

        assert isinstance(response, ErrorResponse)
        assert response.code == ErrorCode.ERR_VERSION_CONFLICT
        assert "expected=0" in response.message
        assert response.errors == []

    def test_invalid_argument_with_field_adds_violation(self):
        response = error_response(InvalidArgumentError("Invalid If-Match header: abc", field="If-Match"))

        assert len(response.errors) == 1
        assert response.errors[0].field == "If-Match"
        assert response.errors[0].message == "Invalid If-Match header: abc"

    def test_invalid_argument_without_field(self):
        response = error_response(InvalidArgumentError("Task payload must not be empty"))

        assert response.errors == []
