"""Data access for refresh tokens: persist, look up, revoke, sweep.

Tokens are stored by SHA-256 digest. Revocation is a conditional UPDATE so
that two requests racing on the same token cannot both consume it.
"""

import hashlib
from datetime import UTC, datetime

from sqlalchemy.orm import Session

from app.models import RefreshToken


def hash_token(token: str) -> str:
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


def create(session: Session, user_id: int, token: str, expires_at: datetime) -> RefreshToken:
    row = RefreshToken(
        token_hash=hash_token(token),
        user_id=user_id,
        expires_at=expires_at,
    )
    session.add(row)
    session.commit()
    return row


def find_active(session: Session, token: str, now: datetime | None = None) -> RefreshToken | None:
    """Return the stored token if it exists, is not revoked and has not expired."""
    now = now or datetime.now(UTC)
    return (
        session.query(RefreshToken)
        .filter(
            RefreshToken.token_hash == hash_token(token),
            RefreshToken.revoked_at.is_(None),
            RefreshToken.expires_at > now,
        )
        .first()
    )


def revoke(session: Session, token: str) -> bool:
    """
    Mark the token revoked. Returns True only if this call revoked it.

    Unknown or already revoked tokens are left untouched and return False.
    """
    updated = (
        session.query(RefreshToken)
        .filter(
            RefreshToken.token_hash == hash_token(token),
            RefreshToken.revoked_at.is_(None),
        )
        .update({RefreshToken.revoked_at: datetime.now(UTC)}, synchronize_session=False)
    )
    session.commit()
    return updated > 0


def revoke_all_for_user(session: Session, user_id: int) -> int:
    """Revoke every active token of user_id; returns how many were revoked."""
    updated = (
        session.query(RefreshToken)
        .filter(
            RefreshToken.user_id == user_id,
            RefreshToken.revoked_at.is_(None),
        )
        .update({RefreshToken.revoked_at: datetime.now(UTC)}, synchronize_session=False)
    )
    session.commit()
    return updated


def delete_expired(session: Session, now: datetime | None = None) -> int:
    now = now or datetime.now(UTC)
    deleted = (
        session.query(RefreshToken)
        .filter(RefreshToken.expires_at < now)
        .delete(synchronize_session=False)
    )
    session.commit()
    return deleted
