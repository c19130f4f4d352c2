"""Request/response schemas for admin endpoints."""

from pydantic import Field

from app.models import UserRole
from app.schemas.common import CamelModel


class UpdateRoleRequest(CamelModel):
    role: UserRole = Field(..., description="New role: user or admin")


class PageQuery(CamelModel):
    page: int = Field(default=1, ge=1)
    limit: int = Field(default=10, ge=1, le=100)


class AdminStats(CamelModel):
    total_users: int
    total_tasks: int
    admin_count: int
    user_count: int
