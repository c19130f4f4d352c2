"""Role and ownership checks shared by the API dependencies and services."""

from collections.abc import Iterable

from app.core.errors import AuthorizationError
from app.models import UserRole
from app.schemas.auth import CurrentUser


def check_role(user: CurrentUser, allowed: Iterable[UserRole]) -> None:
    """Raise AuthorizationError unless user.role is one of allowed."""
    if user.role not in frozenset(allowed):
        raise AuthorizationError("Insufficient permissions for this action")


def ensure_owner_or_admin(user: CurrentUser, owner_id: int, action: str = "access") -> None:
    """Owners may act on their own resources; admins may act on any."""
    if user.id == owner_id or user.role is UserRole.ADMIN:
        return
    raise AuthorizationError(f"You do not have permission to {action} this task")
