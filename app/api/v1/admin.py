"""Admin endpoints: user management, dashboard stats, all tasks. Admin role required."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query

from app.api.deps import AdminUser, DbSession, authenticate, require_admin
from app.schemas.admin import AdminStats, PageQuery, UpdateRoleRequest
from app.schemas.auth import UserOut
from app.schemas.common import ApiResponse
from app.schemas.task import TaskOut, TaskQuery
from app.services import admin as admin_service
from app.services import tasks as task_service

router = APIRouter(dependencies=[Depends(authenticate), Depends(require_admin)])


@router.get("/stats", response_model=ApiResponse[AdminStats])
def get_stats(db: DbSession) -> ApiResponse[AdminStats]:
    return ApiResponse(data=admin_service.stats(db))


@router.get("/users", response_model=ApiResponse[list[UserOut]])
def list_users(query: Annotated[PageQuery, Query()], db: DbSession) -> ApiResponse[list[UserOut]]:
    """List all users, newest first."""
    users, pagination = admin_service.list_users(db, query.page, query.limit)
    return ApiResponse(data=users, pagination=pagination)


@router.get("/users/{user_id}", response_model=ApiResponse[UserOut])
def get_user(user_id: int, db: DbSession) -> ApiResponse[UserOut]:
    return ApiResponse(data=admin_service.get_user(db, user_id))


@router.patch("/users/{user_id}/role", response_model=ApiResponse[UserOut])
def update_user_role(
    user_id: int,
    body: UpdateRoleRequest,
    admin: AdminUser,
    db: DbSession,
) -> ApiResponse[UserOut]:
    """Set a user's role. An admin cannot change their own role."""
    user = admin_service.update_user_role(db, admin, user_id, body.role)
    return ApiResponse(message="User role updated successfully", data=user)


@router.delete("/users/{user_id}", response_model=ApiResponse[None])
def delete_user(user_id: int, admin: AdminUser, db: DbSession) -> ApiResponse[None]:
    """Delete a user and everything they own. An admin cannot delete their own account."""
    admin_service.delete_user(db, admin, user_id)
    return ApiResponse(message="User deleted successfully")


@router.get("/tasks", response_model=ApiResponse[list[TaskOut]])
def list_all_tasks(query: Annotated[TaskQuery, Query()], db: DbSession) -> ApiResponse[list[TaskOut]]:
    tasks, pagination = task_service.list_all_tasks(db, query)
    return ApiResponse(data=tasks, pagination=pagination)
