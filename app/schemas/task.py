"""Request/response schemas for task endpoints."""

from datetime import datetime
from typing import Literal

from pydantic import Field, field_validator

from app.models import TaskPriority, TaskStatus
from app.schemas.common import CamelModel

TITLE_MAX_LEN = 200
DESCRIPTION_MAX_LEN = 2000
SEARCH_MAX_LEN = 100
MAX_PAGE_SIZE = 100


def _clean_description(v: str | None) -> str | None:
    if v is None:
        return None
    return v.strip() or None


class TaskCreate(CamelModel):
    title: str = Field(..., min_length=1, max_length=TITLE_MAX_LEN)
    description: str | None = Field(default=None, max_length=DESCRIPTION_MAX_LEN)
    status: TaskStatus = TaskStatus.PENDING
    priority: TaskPriority = TaskPriority.MEDIUM
    due_date: datetime | None = None

    @field_validator("title")
    @classmethod
    def strip_title(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Title is required")
        return v

    @field_validator("description")
    @classmethod
    def strip_description(cls, v: str | None) -> str | None:
        return _clean_description(v)


class TaskUpdate(CamelModel):
    """Partial update: only fields present in the request body are applied."""

    title: str | None = Field(default=None, min_length=1, max_length=TITLE_MAX_LEN)
    description: str | None = Field(default=None, max_length=DESCRIPTION_MAX_LEN)
    status: TaskStatus | None = None
    priority: TaskPriority | None = None
    due_date: datetime | None = None

    @field_validator("title")
    @classmethod
    def strip_title(cls, v: str | None) -> str | None:
        if v is None:
            raise ValueError("Title cannot be empty")
        v = v.strip()
        if not v:
            raise ValueError("Title cannot be empty")
        return v

    @field_validator("description")
    @classmethod
    def strip_description(cls, v: str | None) -> str | None:
        return _clean_description(v)

    @field_validator("status", "priority")
    @classmethod
    def reject_null(cls, v: object) -> object:
        if v is None:
            raise ValueError("Field cannot be null")
        return v


class TaskQuery(CamelModel):
    page: int = Field(default=1, ge=1)
    limit: int = Field(default=10, ge=1, le=MAX_PAGE_SIZE)
    status: TaskStatus | None = None
    priority: TaskPriority | None = None
    search: str | None = Field(default=None, max_length=SEARCH_MAX_LEN)
    sort_by: Literal["createdAt", "updatedAt", "dueDate", "priority", "title"] = "createdAt"
    sort_order: Literal["asc", "desc"] = "desc"


class TaskOut(CamelModel):
    id: int
    title: str
    description: str | None
    status: TaskStatus
    priority: TaskPriority
    due_date: datetime | None
    user_id: int
    created_at: datetime | None = None
    updated_at: datetime | None = None


class TaskStats(CamelModel):
    pending: int = 0
    in_progress: int = 0
    completed: int = 0
    cancelled: int = 0
