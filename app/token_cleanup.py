"""
CLI entrypoint for the expired refresh-token sweep. Run from cron, e.g.:

  python -m app.token_cleanup

Or hourly: 0 * * * * cd /path/to/tasklane && .venv/bin/python -m app.token_cleanup
"""

import logging
import sys

from app.core.config import get_settings
from app.core.database import create_db_engine, create_session_factory
from app.core.logging import configure_logging
from app.services.token_cleanup import run_token_cleanup

logger = logging.getLogger(__name__)


def main() -> int:
    """Run the sweep once: delete refresh tokens past their expiry."""
    settings = get_settings()
    configure_logging(settings)
    engine = create_db_engine(settings)
    db = create_session_factory(engine)()
    try:
        deleted = run_token_cleanup(db, settings)
        logger.info("Token cleanup completed: tokens_deleted=%s", deleted)
        return 0
    except Exception as e:
        logger.exception("Token cleanup job failed: %s", e)
        return 1
    finally:
        db.close()
        engine.dispose()


if __name__ == "__main__":
    sys.exit(main())
