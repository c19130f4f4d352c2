"""Task endpoints. Every route requires a bearer token; /all is admin-only."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, status

from app.api.deps import AuthenticatedUser, DbSession, authenticate, require_admin
from app.schemas.common import ApiResponse
from app.schemas.task import TaskCreate, TaskOut, TaskQuery, TaskStats, TaskUpdate
from app.services import tasks as task_service

router = APIRouter(dependencies=[Depends(authenticate)])

TaskQueryParams = Annotated[TaskQuery, Query()]


@router.post(
    "",
    response_model=ApiResponse[TaskOut],
    status_code=status.HTTP_201_CREATED,
)
def create_task(body: TaskCreate, user: AuthenticatedUser, db: DbSession) -> ApiResponse[TaskOut]:
    task = task_service.create_task(db, user, body)
    return ApiResponse(message="Task created successfully", data=task)


@router.get("", response_model=ApiResponse[list[TaskOut]])
def list_tasks(query: TaskQueryParams, user: AuthenticatedUser, db: DbSession) -> ApiResponse[list[TaskOut]]:
    """
    List the caller's tasks.

    Filter with status, priority and search (title/description, case-insensitive);
    order with sortBy (createdAt, updatedAt, dueDate, priority, title) and sortOrder.
    """
    tasks, pagination = task_service.list_user_tasks(db, user, query)
    return ApiResponse(data=tasks, pagination=pagination)


@router.get("/stats", response_model=ApiResponse[TaskStats])
def get_task_stats(user: AuthenticatedUser, db: DbSession) -> ApiResponse[TaskStats]:
    return ApiResponse(data=task_service.task_stats(db, user))


@router.get(
    "/all",
    response_model=ApiResponse[list[TaskOut]],
    dependencies=[Depends(require_admin)],
)
def list_all_tasks(query: TaskQueryParams, db: DbSession) -> ApiResponse[list[TaskOut]]:
    """List tasks of every user (admin only)."""
    tasks, pagination = task_service.list_all_tasks(db, query)
    return ApiResponse(data=tasks, pagination=pagination)


@router.get("/{task_id}", response_model=ApiResponse[TaskOut])
def get_task(task_id: int, user: AuthenticatedUser, db: DbSession) -> ApiResponse[TaskOut]:
    return ApiResponse(data=task_service.get_task(db, task_id, user))


@router.put("/{task_id}", response_model=ApiResponse[TaskOut])
def update_task(task_id: int, body: TaskUpdate, user: AuthenticatedUser, db: DbSession) -> ApiResponse[TaskOut]:
    task = task_service.update_task(db, task_id, user, body)
    return ApiResponse(message="Task updated successfully", data=task)


@router.delete("/{task_id}", response_model=ApiResponse[None])
def delete_task(task_id: int, user: AuthenticatedUser, db: DbSession) -> ApiResponse[None]:
    task_service.delete_task(db, task_id, user)
    return ApiResponse(message="Task deleted successfully")
