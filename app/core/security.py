"""Password hashing and JWT issue/verification for access and refresh tokens.

Token functions are pure: their output depends only on the settings
(secrets, algorithm, lifetimes), the payload and the clock value passed in.
Verification returns a TokenVerification instead of raising, because an
expired or forged token is an expected outcome, not an error.
"""

import enum
import logging
import re
import uuid
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any

import bcrypt
import jwt

from app.core.config import Settings
from app.models.user import UserRole

logger = logging.getLogger(__name__)

# Lifetime used when a configured duration string cannot be parsed.
DEFAULT_TOKEN_LIFETIME = timedelta(days=7)

REFRESH_TOKEN_TYPE = "refresh"

# bcrypt only looks at the first 72 bytes of a password.
BCRYPT_MAX_BYTES = 72

_DURATION_RE = re.compile(r"^(\d+)([smhd])$")
_DURATION_UNITS = {
    "s": "seconds",
    "m": "minutes",
    "h": "hours",
    "d": "days",
}


def parse_duration(value: str) -> timedelta:
    """
    Parse a lifetime like "30s", "15m", "12h" or "7d".

    Anything else (empty, missing unit, unknown unit, spaces) falls back to
    DEFAULT_TOKEN_LIFETIME and logs a warning.
    """
    match = _DURATION_RE.match(value or "")
    if match is None:
        logger.warning(
            "Unparseable token lifetime %r; falling back to %s",
            value,
            DEFAULT_TOKEN_LIFETIME,
        )
        return DEFAULT_TOKEN_LIFETIME
    amount, unit = match.groups()
    return timedelta(**{_DURATION_UNITS[unit]: int(amount)})


def hash_password(plain_password: str, rounds: int) -> str:
    """Hash a plain-text password for storage. Do not store plain passwords."""
    pw_bytes = plain_password.encode("utf-8")[:BCRYPT_MAX_BYTES]
    return bcrypt.hashpw(pw_bytes, bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def verify_password(plain_password: str, hashed: str) -> bool:
    """Verify a plain password against a stored hash."""
    pw_bytes = plain_password.encode("utf-8")[:BCRYPT_MAX_BYTES]
    try:
        return bcrypt.checkpw(pw_bytes, hashed.encode("utf-8"))
    except (ValueError, TypeError):
        return False


class TokenStatus(str, enum.Enum):
    VALID = "valid"
    EXPIRED = "expired"
    INVALID = "invalid"


@dataclass(frozen=True)
class AccessClaims:
    user_id: int
    email: str
    role: UserRole


@dataclass(frozen=True)
class RefreshClaims:
    user_id: int


@dataclass(frozen=True)
class TokenVerification:
    """Outcome of verifying a token: claims are set only when status is VALID."""

    status: TokenStatus
    claims: AccessClaims | RefreshClaims | None = None

    @property
    def is_valid(self) -> bool:
        return self.status is TokenStatus.VALID


_EXPIRED = TokenVerification(TokenStatus.EXPIRED)
_INVALID = TokenVerification(TokenStatus.INVALID)


def _now(now: datetime | None) -> datetime:
    return now if now is not None else datetime.now(UTC)


def access_token_lifetime(settings: Settings) -> timedelta:
    return parse_duration(settings.JWT_EXPIRES_IN)


def refresh_token_lifetime(settings: Settings) -> timedelta:
    return parse_duration(settings.JWT_REFRESH_EXPIRES_IN)


def create_access_token(
    user_id: int,
    email: str,
    role: UserRole,
    settings: Settings,
    now: datetime | None = None,
) -> str:
    """Create a JWT access token carrying id, email, role, iat and exp."""
    issued_at = _now(now)
    payload: dict[str, Any] = {
        "id": user_id,
        "email": email,
        "role": UserRole(role).value,
        "iat": issued_at,
        "exp": issued_at + access_token_lifetime(settings),
    }
    return jwt.encode(
        payload,
        settings.JWT_SECRET.get_secret_value(),
        algorithm=settings.JWT_ALGORITHM,
    )


def create_refresh_token(
    user_id: int,
    settings: Settings,
    now: datetime | None = None,
) -> tuple[str, datetime]:
    """
    Create a JWT refresh token signed with the refresh secret.

    Returns (token, expires_at). The random jti keeps tokens issued in the
    same second distinct.
    """
    issued_at = _now(now)
    expires_at = issued_at + refresh_token_lifetime(settings)
    payload: dict[str, Any] = {
        "id": user_id,
        "type": REFRESH_TOKEN_TYPE,
        "jti": uuid.uuid4().hex,
        "iat": issued_at,
        "exp": expires_at,
    }
    token = jwt.encode(
        payload,
        settings.JWT_REFRESH_SECRET.get_secret_value(),
        algorithm=settings.JWT_ALGORITHM,
    )
    return token, expires_at


def _decode(token: str, secret: str, algorithm: str) -> dict[str, Any] | TokenVerification:
    try:
        return jwt.decode(
            token,
            secret,
            algorithms=[algorithm],
            options={"require": ["exp", "iat"]},
        )
    except jwt.ExpiredSignatureError:
        return _EXPIRED
    except jwt.PyJWTError:
        return _INVALID


def _valid_user_id(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def verify_access_token(token: str, settings: Settings) -> TokenVerification:
    """Verify signature, expiry and claim shape of an access token."""
    payload = _decode(token, settings.JWT_SECRET.get_secret_value(), settings.JWT_ALGORITHM)
    if isinstance(payload, TokenVerification):
        return payload
    user_id = payload.get("id")
    email = payload.get("email")
    if not _valid_user_id(user_id) or not isinstance(email, str):
        return _INVALID
    try:
        role = UserRole(payload.get("role"))
    except ValueError:
        return _INVALID
    return TokenVerification(
        TokenStatus.VALID,
        AccessClaims(user_id=user_id, email=email, role=role),
    )


def verify_refresh_token(token: str, settings: Settings) -> TokenVerification:
    """Verify a refresh token against the refresh secret only."""
    payload = _decode(
        token, settings.JWT_REFRESH_SECRET.get_secret_value(), settings.JWT_ALGORITHM
    )
    if isinstance(payload, TokenVerification):
        return payload
    user_id = payload.get("id")
    if payload.get("type") != REFRESH_TOKEN_TYPE or not _valid_user_id(user_id):
        return _INVALID
    return TokenVerification(TokenStatus.VALID, RefreshClaims(user_id=user_id))
