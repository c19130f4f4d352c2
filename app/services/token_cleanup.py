"""Expired refresh-token sweep: delete rows whose expires_at has passed."""

import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sqlalchemy.orm import Session

from app.repositories import refresh_tokens

if TYPE_CHECKING:
    from app.core.config import Settings

logger = logging.getLogger(__name__)


def run_token_cleanup(session: Session, settings: "Settings", now: datetime | None = None) -> int:
    """
    Delete refresh tokens that expired before now. Returns the number deleted.

    Expired tokens are already rejected at refresh time, so this only reclaims
    storage. Idempotent: safe to run repeatedly.
    """
    if not settings.TOKEN_CLEANUP_ENABLED:
        logger.info("Token cleanup is disabled (TOKEN_CLEANUP_ENABLED=false); skipping.")
        return 0

    cutoff = now or datetime.now(UTC)
    deleted_count = refresh_tokens.delete_expired(session, cutoff)

    if deleted_count > 0:
        logger.info(
            "Token cleanup run: cutoff=%s, tokens_deleted=%s",
            cutoff.isoformat(),
            deleted_count,
        )
    return deleted_count
