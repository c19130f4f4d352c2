"""Authentication flow: register, login, refresh (rotate-on-use), logout, logout-all."""

import logging
from typing import TYPE_CHECKING

from sqlalchemy.orm import Session

from app.core.errors import AuthenticationError, ConflictError, NotFoundError
from app.core.security import (
    create_access_token,
    create_refresh_token,
    hash_password,
    verify_password,
    verify_refresh_token,
)
from app.models import User, UserRole
from app.repositories import refresh_tokens, users
from app.schemas.auth import AuthResult, TokenPair, UserOut

if TYPE_CHECKING:
    from app.core.config import Settings

logger = logging.getLogger(__name__)

# Same message for unknown email and wrong password so callers cannot probe for accounts.
INVALID_CREDENTIALS_MESSAGE = "Invalid email or password"
INVALID_REFRESH_MESSAGE = "Invalid or expired refresh token"


def sanitize_user(user: User) -> UserOut:
    return UserOut.model_validate(user)


def issue_token_pair(session: Session, user: User, settings: "Settings") -> TokenPair:
    """Sign a new access/refresh pair for user and persist the refresh token."""
    access_token = create_access_token(user.id, user.email, user.role, settings)
    refresh_token, expires_at = create_refresh_token(user.id, settings)
    refresh_tokens.create(session, user.id, refresh_token, expires_at)
    return TokenPair(access_token=access_token, refresh_token=refresh_token)


def register(
    session: Session,
    settings: "Settings",
    *,
    email: str,
    password: str,
    name: str,
) -> AuthResult:
    """Create a user with role 'user' and return it with a fresh token pair."""
    if users.exists_by_email(session, email):
        raise ConflictError(users.DUPLICATE_EMAIL_MESSAGE)

    user = users.create(
        session,
        email=email,
        password_hash=hash_password(password, settings.BCRYPT_ROUNDS),
        name=name,
        role=UserRole.USER,
    )
    logger.info("Registered user id=%s", user.id)
    tokens = issue_token_pair(session, user, settings)
    return AuthResult(user=sanitize_user(user), tokens=tokens)


def login(
    session: Session,
    settings: "Settings",
    *,
    email: str,
    password: str,
) -> AuthResult:
    user = users.get_by_email(session, email)
    if user is None:
        raise AuthenticationError(INVALID_CREDENTIALS_MESSAGE)
    if not verify_password(password, user.password_hash):
        raise AuthenticationError(INVALID_CREDENTIALS_MESSAGE)

    tokens = issue_token_pair(session, user, settings)
    return AuthResult(user=sanitize_user(user), tokens=tokens)


def refresh(session: Session, settings: "Settings", refresh_token: str) -> TokenPair:
    """
    Exchange a refresh token for a new pair; the presented token is single-use.

    The store check runs first (absent, revoked or expired rows are rejected),
    then the signature check. A stored token with a bad signature is revoked.
    Revoking the old token and persisting the new one are separate commits: if
    the process dies in between, the user holds no valid refresh token and has
    to log in again.
    """
    stored = refresh_tokens.find_active(session, refresh_token)
    if stored is None:
        raise AuthenticationError(INVALID_REFRESH_MESSAGE)

    verification = verify_refresh_token(refresh_token, settings)
    if not verification.is_valid:
        refresh_tokens.revoke(session, refresh_token)
        logger.warning(
            "Refresh token for user id=%s failed verification (%s); revoked",
            stored.user_id,
            verification.status.value,
        )
        raise AuthenticationError(INVALID_REFRESH_MESSAGE)

    user = users.get_by_id(session, stored.user_id)
    if user is None:
        raise AuthenticationError("User not found")

    if not refresh_tokens.revoke(session, refresh_token):
        # Another request consumed this token between our lookup and revoke.
        logger.warning("Refresh token reuse detected for user id=%s", user.id)
        raise AuthenticationError(INVALID_REFRESH_MESSAGE)

    return issue_token_pair(session, user, settings)


def logout(session: Session, refresh_token: str) -> None:
    """Revoke one refresh token. Unknown or already revoked tokens are a no-op."""
    refresh_tokens.revoke(session, refresh_token)


def logout_all(session: Session, user_id: int) -> int:
    revoked = refresh_tokens.revoke_all_for_user(session, user_id)
    logger.info("Revoked %s refresh token(s) for user id=%s", revoked, user_id)
    return revoked


def get_profile(session: Session, user_id: int) -> UserOut:
    user = users.get_by_id(session, user_id)
    if user is None:
        raise NotFoundError("User")
    return sanitize_user(user)
