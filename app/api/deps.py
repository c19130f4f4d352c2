"""Request-scoped dependencies: settings, DB session, and the authorization gate.

authenticate / optional_authenticate decode the bearer access token and put
the identity on request.state.user. authorize(*roles) reads that identity
back, so it must be declared after authenticate on the same route or router.
"""

from collections.abc import Callable, Generator
from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from app.core.config import Settings
from app.core.errors import AuthenticationError
from app.core.security import AccessClaims, TokenStatus, verify_access_token
from app.models import UserRole
from app.schemas.auth import CurrentUser
from app.services.access import check_role

BEARER_SCHEME = "Bearer"


def get_app_settings(request: Request) -> Settings:
    """Settings owned by the application instance (see app.main.create_app)."""
    return request.app.state.settings


def get_db(request: Request) -> Generator[Session, None, None]:
    """Dependency that yields a DB session and closes it when done."""
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()


def extract_bearer_token(authorization: str | None) -> str:
    """
    Return the token from an "Authorization: Bearer <token>" header value.

    The value must be exactly two space-separated parts with the literal,
    case-sensitive "Bearer" scheme.
    """
    if not authorization:
        raise AuthenticationError("No authorization header provided")
    parts = authorization.split(" ")
    if len(parts) != 2 or parts[0] != BEARER_SCHEME or not parts[1]:
        raise AuthenticationError("Invalid authorization header format")
    return parts[1]


def resolve_identity(authorization: str | None, settings: Settings) -> CurrentUser:
    """Extract and verify the access token; raise AuthenticationError on any failure."""
    token = extract_bearer_token(authorization)
    result = verify_access_token(token, settings)
    if result.status is TokenStatus.EXPIRED:
        raise AuthenticationError("Token has expired", details={"reason": "token_expired"})
    if result.status is TokenStatus.INVALID or not isinstance(result.claims, AccessClaims):
        raise AuthenticationError("Invalid token", details={"reason": "token_invalid"})
    claims = result.claims
    return CurrentUser(id=claims.user_id, email=claims.email, role=claims.role)


def authenticate(
    request: Request,
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> CurrentUser:
    """Dependency: require a valid bearer access token and return the caller."""
    user = resolve_identity(request.headers.get("Authorization"), settings)
    request.state.user = user
    return user


def optional_authenticate(
    request: Request,
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> CurrentUser | None:
    """Dependency: like authenticate, but a missing or bad credential yields None."""
    try:
        user = resolve_identity(request.headers.get("Authorization"), settings)
    except AuthenticationError:
        request.state.user = None
        return None
    request.state.user = user
    return user


def get_request_user(request: Request) -> CurrentUser:
    """Identity stored by authenticate; AuthenticationError if none was stored."""
    user = getattr(request.state, "user", None)
    if user is None:
        raise AuthenticationError("User not authenticated")
    return user


def authorize(*allowed_roles: UserRole) -> Callable[[Request], CurrentUser]:
    """Build a dependency that admits only callers whose role is in allowed_roles."""
    allowed = frozenset(allowed_roles)

    def dependency(request: Request) -> CurrentUser:
        user = get_request_user(request)
        check_role(user, allowed)
        return user

    return dependency


require_admin = authorize(UserRole.ADMIN)

AuthenticatedUser = Annotated[CurrentUser, Depends(authenticate)]
AdminUser = Annotated[CurrentUser, Depends(require_admin)]
DbSession = Annotated[Session, Depends(get_db)]
AppSettings = Annotated[Settings, Depends(get_app_settings)]
