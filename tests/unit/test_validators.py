"""Unit tests for request model validation and If-Match parsing."""

from datetime import date, timedelta

import pytest
from pydantic import ValidationError

from src.core.errors import InvalidArgumentError
from src.domain.create_models import TaskCreate
from src.domain.task import TaskStatus
from src.domain.update_models import TaskUpdate
from src.interface.task_router import parse_if_match


@pytest.mark.unit
class TestTaskCreate:
    """Tests for TaskCreate validation."""

    def test_minimal_payload(self):
        payload = TaskCreate(title="Do it", status=TaskStatus.OPEN)

        assert payload.description is None
        assert payload.due_date is None

    def test_blank_title_rejected(self):
        with pytest.raises(ValidationError, match="Title cannot be blank"):
            TaskCreate(title="   ", status=TaskStatus.OPEN)

    def test_empty_title_rejected(self):
        with pytest.raises(ValidationError):
            TaskCreate(title="", status=TaskStatus.OPEN)

    def test_title_length_bound(self):
        TaskCreate(title="x" * 200, status=TaskStatus.OPEN)

        with pytest.raises(ValidationError):
            TaskCreate(title="x" * 201, status=TaskStatus.OPEN)

    def test_description_length_bound(self):
        TaskCreate(title="t", description="d" * 4000, status=TaskStatus.OPEN)

        with pytest.raises(ValidationError):
            TaskCreate(title="t", description="d" * 4001, status=TaskStatus.OPEN)

    def test_status_required(self):
        with pytest.raises(ValidationError):
            TaskCreate(title="t")

    def test_unknown_status_rejected(self):
        with pytest.raises(ValidationError):
            TaskCreate(title="t", status="BLOCKED")

    def test_due_date_today_allowed(self):
        payload = TaskCreate(title="t", status=TaskStatus.OPEN, due_date=date.today())

        assert payload.due_date == date.today()

    def test_due_date_in_past_rejected(self):
        with pytest.raises(ValidationError, match="must not be in the past"):
            TaskCreate(title="t", status=TaskStatus.OPEN, due_date=date.today() - timedelta(days=1))


@pytest.mark.unit
class TestTaskUpdate:
    """Tests for TaskUpdate validation."""

    def test_past_due_date_allowed_on_update(self):
        payload = TaskUpdate(title="t", status=TaskStatus.DONE, due_date=date.today() - timedelta(days=3))

        assert payload.due_date < date.today()

    def test_blank_title_rejected(self):
        with pytest.raises(ValidationError):
            TaskUpdate(title="\t", status=TaskStatus.DONE)


@pytest.mark.unit
class TestParseIfMatch:
    """Tests for parse_if_match function."""

    @pytest.mark.parametrize(
        ("header", "expected"),
        [
            ("0", 0),
            ("17", 17),
            (" 3 ", 3),
            ('"4"', 4),
        ],
    )
    def test_valid_values(self, header, expected):
        assert parse_if_match(header) == expected

    @pytest.mark.parametrize("header", [None, "", "  "])
    def test_missing_header(self, header):
        with pytest.raises(InvalidArgumentError, match="Missing required header"):
            parse_if_match(header)

    @pytest.mark.parametrize("header", ["abc", "-1", "1.5", 'W/"2"', "*", "²"])
    def test_invalid_values(self, header):
        with pytest.raises(InvalidArgumentError, match="Invalid If-Match"):
            parse_if_match(header)
