"""Pydantic models for service layer return types.

These models provide type safety at service boundaries.
"""

from pydantic import BaseModel

from src.domain.task import Task


class TaskPage(BaseModel):
    """One page of search results.

    `page` and `size` are the normalized values actually used for the query;
    `total` counts every task matching the filter regardless of paging.
    """

    content: list[Task]
    page: int
    size: int
    total: int
