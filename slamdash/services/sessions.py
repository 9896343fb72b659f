"""Session manager: issue, validate and revoke opaque bearer tokens."""

import logging
from collections.abc import Callable
from datetime import datetime, timedelta, timezone

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from slamdash.core.exceptions import StorageError
from slamdash.core.security import SESSION_TOKEN_LENGTH, generate_session_token
from slamdash.models import UserSession

logger = logging.getLogger(__name__)

DEFAULT_SESSION_TTL = timedelta(hours=24)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; everything is written in UTC.
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class SessionManager:
    """
    Fixed-window sessions persisted in the sessions table.

    A token is valid iff its row exists and now < expires_at. Validation never
    moves expires_at. Each operation is a single statement in its own DB session,
    so a committed revoke is visible to every later validate.
    """

    def __init__(
        self,
        session_factory: sessionmaker[Session],
        ttl: timedelta = DEFAULT_SESSION_TTL,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        if ttl <= timedelta(0):
            raise ValueError("Session TTL must be positive")
        self._session_factory = session_factory
        self._ttl = ttl
        self._clock = clock

    @property
    def ttl(self) -> timedelta:
        return self._ttl

    def issue(self, user_id: int) -> str:
        """Persist a new session for user_id and return its token. Raises StorageError."""
        token = generate_session_token()
        now = _as_utc(self._clock())
        row = UserSession(
            id=token,
            user_id=user_id,
            created_at=now,
            expires_at=now + self._ttl,
        )
        try:
            with self._session_factory() as db:
                db.add(row)
                db.commit()
        except SQLAlchemyError as e:
            logger.exception("Failed to persist session for user_id=%s", user_id)
            raise StorageError("Failed to create session") from e
        return token

    def validate(self, token: str | None) -> int | None:
        """Return the owning user id, or None if the token is missing, unknown or expired."""
        if not token or len(token) > SESSION_TOKEN_LENGTH:
            return None
        try:
            with self._session_factory() as db:
                row = db.get(UserSession, token)
                if row is None:
                    return None
                user_id, expires_at = row.user_id, row.expires_at
        except SQLAlchemyError as e:
            logger.exception("Session lookup failed")
            raise StorageError("Session lookup failed") from e
        if _as_utc(self._clock()) >= _as_utc(expires_at):
            return None
        return user_id

    def revoke(self, token: str | None) -> None:
        """Delete the session row for token. Unknown tokens are a no-op."""
        if not token:
            return
        try:
            with self._session_factory() as db:
                db.query(UserSession).filter(UserSession.id == token).delete(
                    synchronize_session=False
                )
                db.commit()
        except SQLAlchemyError as e:
            logger.exception("Session revoke failed")
            raise StorageError("Session revoke failed") from e

    def purge_expired(self) -> int:
        """Delete rows whose expires_at has passed. Rows still inside their TTL are kept."""
        cutoff = _as_utc(self._clock())
        try:
            with self._session_factory() as db:
                deleted = (
                    db.query(UserSession)
                    .filter(UserSession.expires_at <= cutoff)
                    .delete(synchronize_session=False)
                )
                db.commit()
        except SQLAlchemyError as e:
            logger.exception("Session purge failed")
            raise StorageError("Session purge failed") from e
        return deleted
