"""Data access for users. Emails are normalized to lowercase on every path in."""

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.errors import ConflictError
from app.models import User, UserRole

DUPLICATE_EMAIL_MESSAGE = "An account with this email already exists"


def normalize_email(email: str) -> str:
    return email.strip().lower()


def get_by_id(session: Session, user_id: int) -> User | None:
    return session.get(User, user_id)


def get_by_email(session: Session, email: str) -> User | None:
    return session.query(User).filter(User.email == normalize_email(email)).first()


def exists_by_email(session: Session, email: str) -> bool:
    count = (
        session.query(func.count(User.id))
        .filter(User.email == normalize_email(email))
        .scalar()
    )
    return bool(count)


def create(
    session: Session,
    *,
    email: str,
    password_hash: str,
    name: str,
    role: UserRole = UserRole.USER,
) -> User:
    """
    Insert a user and commit.

    Raises ConflictError when the unique email index rejects the row (e.g. two
    concurrent registrations that both passed the existence check).
    """
    user = User(
        email=normalize_email(email),
        password_hash=password_hash,
        name=name.strip(),
        role=role,
    )
    session.add(user)
    try:
        session.commit()
    except IntegrityError as e:
        session.rollback()
        raise ConflictError(DUPLICATE_EMAIL_MESSAGE) from e
    session.refresh(user)
    return user


def update_role(session: Session, user_id: int, role: UserRole) -> User | None:
    user = session.get(User, user_id)
    if user is None:
        return None
    user.role = role
    session.commit()
    session.refresh(user)
    return user


def delete(session: Session, user_id: int) -> bool:
    """Delete a user together with their tasks and refresh tokens."""
    user = session.get(User, user_id)
    if user is None:
        return False
    session.delete(user)
    session.commit()
    return True


def list_page(session: Session, page: int, limit: int) -> tuple[list[User], int]:
    """Return one page of users, newest first, and the total user count."""
    total = session.query(func.count(User.id)).scalar() or 0
    users = (
        session.query(User)
        .order_by(User.created_at.desc(), User.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return users, total


def count_all(session: Session) -> int:
    return session.query(func.count(User.id)).scalar() or 0


def count_by_role(session: Session, role: UserRole) -> int:
    return session.query(func.count(User.id)).filter(User.role == role).scalar() or 0
