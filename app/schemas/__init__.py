"""Pydantic request/response schemas."""

from app.schemas.admin import AdminStats, PageQuery, UpdateRoleRequest
from app.schemas.auth import (
    AuthResult,
    CurrentUser,
    LoginRequest,
    RefreshTokenRequest,
    RegisterRequest,
    TokenPair,
    UserOut,
)
from app.schemas.common import ApiResponse, CamelModel, ErrorBody, Pagination
from app.schemas.health import HealthResponse
from app.schemas.task import TaskCreate, TaskOut, TaskQuery, TaskStats, TaskUpdate

__all__ = [
    "AdminStats",
    "ApiResponse",
    "AuthResult",
    "CamelModel",
    "CurrentUser",
    "ErrorBody",
    "HealthResponse",
    "LoginRequest",
    "PageQuery",
    "Pagination",
    "RefreshTokenRequest",
    "RegisterRequest",
    "TaskCreate",
    "TaskOut",
    "TaskQuery",
    "TaskStats",
    "TaskUpdate",
    "TokenPair",
    "UpdateRoleRequest",
    "UserOut",
]
