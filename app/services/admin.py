"""Administrative user management and dashboard counts."""

import logging

from sqlalchemy.orm import Session

from app.core.errors import NotFoundError, ValidationError
from app.models import UserRole
from app.repositories import tasks as task_repo
from app.repositories import users
from app.schemas.admin import AdminStats
from app.schemas.auth import CurrentUser, UserOut
from app.schemas.common import Pagination

logger = logging.getLogger(__name__)


def list_users(session: Session, page: int, limit: int) -> tuple[list[UserOut], Pagination]:
    rows, total = users.list_page(session, page, limit)
    return [UserOut.model_validate(u) for u in rows], Pagination.build(page, limit, total)


def get_user(session: Session, user_id: int) -> UserOut:
    user = users.get_by_id(session, user_id)
    if user is None:
        raise NotFoundError("User")
    return UserOut.model_validate(user)


def update_user_role(session: Session, actor: CurrentUser, user_id: int, role: UserRole) -> UserOut:
    """Change a user's role. Admins cannot change their own role."""
    if user_id == actor.id and role is not actor.role:
        raise ValidationError("Cannot change your own admin role")
    user = users.update_role(session, user_id, role)
    if user is None:
        raise NotFoundError("User")
    logger.info("User id=%s role set to %s by admin id=%s", user_id, role.value, actor.id)
    return UserOut.model_validate(user)


def delete_user(session: Session, actor: CurrentUser, user_id: int) -> None:
    if user_id == actor.id:
        raise ValidationError("Cannot delete your own account")
    if not users.delete(session, user_id):
        raise NotFoundError("User")
    logger.info("User id=%s deleted by admin id=%s", user_id, actor.id)


def stats(session: Session) -> AdminStats:
    return AdminStats(
        total_users=users.count_all(session),
        total_tasks=task_repo.count_all(session),
        admin_count=users.count_by_role(session, UserRole.ADMIN),
        user_count=users.count_by_role(session, UserRole.USER),
    )
