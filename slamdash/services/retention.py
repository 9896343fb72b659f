"""Session hygiene: delete session rows whose expiry has passed."""

import logging
from typing import TYPE_CHECKING

from slamdash.services.sessions import SessionManager

if TYPE_CHECKING:
    from slamdash.core.config import Settings

logger = logging.getLogger(__name__)


def run_session_purge(sessions: SessionManager, settings: "Settings") -> int:
    """
    Delete expired sessions and return how many rows were removed.

    Validation already rejects expired rows, so this only reclaims storage.
    Idempotent: safe to run repeatedly.
    """
    if not settings.SESSION_PURGE_ENABLED:
        logger.info("Session purge is disabled (SESSION_PURGE_ENABLED=false); skipping.")
        return 0

    deleted_count = sessions.purge_expired()
    if deleted_count > 0:
        logger.info("Session purge: sessions_deleted=%s", deleted_count)
    return deleted_count
