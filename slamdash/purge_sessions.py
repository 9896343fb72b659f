"""
CLI entrypoint for the expired-session purge. Run from cron, e.g.:

  python -m slamdash.purge_sessions

Or hourly: 0 * * * * cd /path/to/slamdash && .venv/bin/python -m slamdash.purge_sessions
"""

import logging
import sys

from slamdash.core.config import get_settings
from slamdash.core.database import create_db_engine, create_session_factory
from slamdash.services.retention import run_session_purge
from slamdash.services.sessions import SessionManager

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)


def main() -> int:
    """Delete session rows whose expires_at has passed."""
    settings = get_settings()
    engine = create_db_engine(settings.DATABASE_URL, echo=settings.DEBUG)
    try:
        sessions = SessionManager(create_session_factory(engine))
        deleted = run_session_purge(sessions, settings)
        logger.info("Session purge completed: sessions_deleted=%s", deleted)
        return 0
    except Exception as e:
        logger.exception("Session purge failed: %s", e)
        return 1
    finally:
        engine.dispose()


if __name__ == "__main__":
    sys.exit(main())
