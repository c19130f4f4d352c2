"""ORM model for issued refresh tokens (rotation and revocation state)."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, func
from sqlalchemy.orm import relationship

from app.models.base import Base


class RefreshToken(Base):
    """
    One row per issued refresh token.

    token_hash is the SHA-256 hex digest of the signed token; the token itself
    is never stored. A row is usable only while revoked_at is NULL and
    expires_at is in the future. Rows are revoked, not deleted; the cleanup
    job removes expired rows.
    """

    __tablename__ = "refresh_tokens"

    id = Column(Integer, primary_key=True, autoincrement=True)
    token_hash = Column(String(64), nullable=False, unique=True, index=True)
    user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    expires_at = Column(DateTime(timezone=True), nullable=False, index=True)
    revoked_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    user = relationship("User", back_populates="refresh_tokens")
