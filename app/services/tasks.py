"""Task operations with owner-or-admin access checks."""

from sqlalchemy.orm import Session

from app.core.errors import NotFoundError
from app.models import Task
from app.repositories import tasks as task_repo
from app.repositories.tasks import TaskFilters
from app.schemas.auth import CurrentUser
from app.schemas.common import Pagination
from app.schemas.task import TaskCreate, TaskOut, TaskQuery, TaskStats, TaskUpdate
from app.services.access import ensure_owner_or_admin


def _load_for(session: Session, task_id: int, user: CurrentUser, action: str) -> Task:
    """Fetch a task and check access; a missing task is 404 before any 403."""
    task = task_repo.get_by_id(session, task_id)
    if task is None:
        raise NotFoundError("Task")
    ensure_owner_or_admin(user, task.user_id, action)
    return task


def create_task(session: Session, user: CurrentUser, body: TaskCreate) -> TaskOut:
    task = task_repo.create(session, user.id, body.model_dump())
    return TaskOut.model_validate(task)


def get_task(session: Session, task_id: int, user: CurrentUser) -> TaskOut:
    return TaskOut.model_validate(_load_for(session, task_id, user, "view"))


def update_task(session: Session, task_id: int, user: CurrentUser, body: TaskUpdate) -> TaskOut:
    task = _load_for(session, task_id, user, "update")
    changes = body.model_dump(exclude_unset=True)
    if not changes:
        return TaskOut.model_validate(task)
    return TaskOut.model_validate(task_repo.update(session, task, changes))


def delete_task(session: Session, task_id: int, user: CurrentUser) -> None:
    task = _load_for(session, task_id, user, "delete")
    task_repo.delete(session, task)


def _list(session: Session, query: TaskQuery, user_id: int | None) -> tuple[list[TaskOut], Pagination]:
    filters = TaskFilters(
        user_id=user_id,
        status=query.status,
        priority=query.priority,
        search=query.search,
    )
    rows, total = task_repo.find_page(
        session,
        filters,
        sort_by=query.sort_by,
        sort_order=query.sort_order,
        page=query.page,
        limit=query.limit,
    )
    return (
        [TaskOut.model_validate(t) for t in rows],
        Pagination.build(query.page, query.limit, total),
    )


def list_user_tasks(session: Session, user: CurrentUser, query: TaskQuery) -> tuple[list[TaskOut], Pagination]:
    return _list(session, query, user.id)


def list_all_tasks(session: Session, query: TaskQuery) -> tuple[list[TaskOut], Pagination]:
    return _list(session, query, None)


def task_stats(session: Session, user: CurrentUser) -> TaskStats:
    counts = task_repo.stats_by_status(session, user.id)
    return TaskStats(**{status.value: count for status, count in counts.items()})
