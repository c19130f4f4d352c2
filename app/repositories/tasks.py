"""Data access for tasks: CRUD plus filtered, sorted, paginated queries."""

from dataclasses import dataclass
from typing import Any, Literal

from sqlalchemy import case, func, or_
from sqlalchemy.orm import Query, Session

from app.models import Task, TaskPriority, TaskStatus

SortField = Literal["createdAt", "updatedAt", "dueDate", "priority", "title"]
SortOrder = Literal["asc", "desc"]

# Priority sorts by urgency, not by its string value.
_PRIORITY_RANK = case(
    {
        TaskPriority.LOW.value: 0,
        TaskPriority.MEDIUM.value: 1,
        TaskPriority.HIGH.value: 2,
        TaskPriority.URGENT.value: 3,
    },
    value=Task.priority,
)

_SORT_COLUMNS: dict[str, Any] = {
    "createdAt": Task.created_at,
    "updatedAt": Task.updated_at,
    "dueDate": Task.due_date,
    "priority": _PRIORITY_RANK,
    "title": Task.title,
}


@dataclass(frozen=True)
class TaskFilters:
    user_id: int | None = None
    status: TaskStatus | None = None
    priority: TaskPriority | None = None
    search: str | None = None


def _apply_filters(query: Query, filters: TaskFilters) -> Query:
    if filters.user_id is not None:
        query = query.filter(Task.user_id == filters.user_id)
    if filters.status is not None:
        query = query.filter(Task.status == filters.status)
    if filters.priority is not None:
        query = query.filter(Task.priority == filters.priority)
    if filters.search:
        pattern = f"%{filters.search}%"
        query = query.filter(
            or_(Task.title.ilike(pattern), Task.description.ilike(pattern))
        )
    return query


def get_by_id(session: Session, task_id: int) -> Task | None:
    return session.get(Task, task_id)


def create(session: Session, user_id: int, data: dict[str, Any]) -> Task:
    task = Task(user_id=user_id, **data)
    session.add(task)
    session.commit()
    session.refresh(task)
    return task


def update(session: Session, task: Task, data: dict[str, Any]) -> Task:
    for field, value in data.items():
        setattr(task, field, value)
    session.commit()
    session.refresh(task)
    return task


def delete(session: Session, task: Task) -> None:
    session.delete(task)
    session.commit()


def find_page(
    session: Session,
    filters: TaskFilters,
    *,
    sort_by: SortField = "createdAt",
    sort_order: SortOrder = "desc",
    page: int = 1,
    limit: int = 10,
) -> tuple[list[Task], int]:
    """Return one page of tasks matching filters and the total match count."""
    base = _apply_filters(session.query(Task), filters)
    total = base.order_by(None).count()

    column = _SORT_COLUMNS[sort_by]
    if sort_order == "asc":
        ordering = (column.asc(), Task.id.asc())
    else:
        ordering = (column.desc(), Task.id.desc())
    tasks = base.order_by(*ordering).offset((page - 1) * limit).limit(limit).all()
    return tasks, total


def count_all(session: Session) -> int:
    return session.query(func.count(Task.id)).scalar() or 0


def stats_by_status(session: Session, user_id: int) -> dict[TaskStatus, int]:
    """Count the user's tasks per status; statuses with no tasks report 0."""
    rows = (
        session.query(Task.status, func.count(Task.id))
        .filter(Task.user_id == user_id)
        .group_by(Task.status)
        .all()
    )
    stats = {status: 0 for status in TaskStatus}
    for status, count in rows:
        stats[TaskStatus(status)] = count
    return stats
