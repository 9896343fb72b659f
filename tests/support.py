"""Shared test helpers: in-memory store, settings without .env, and a controllable clock."""

from datetime import datetime, timedelta, timezone

from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from slamdash.core.config import Settings
from slamdash.core.database import create_db_engine, create_session_factory, init_db

# Minimum bcrypt cost; keeps hashing fast in tests.
TEST_BCRYPT_ROUNDS = 4


def make_store() -> tuple[Engine, sessionmaker[Session]]:
    """Fresh in-memory SQLite database with the users and sessions tables."""
    engine = create_db_engine("sqlite://")
    init_db(engine)
    return engine, create_session_factory(engine)


def make_settings(**overrides: object) -> Settings:
    """Settings for an in-memory app, ignoring any local .env file."""
    values: dict[str, object] = {
        "DATABASE_URL": "sqlite://",
        "BCRYPT_ROUNDS": TEST_BCRYPT_ROUNDS,
        "LOG_LEVEL": "WARNING",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


class FrozenClock:
    """Callable clock for SessionManager; time moves only via advance()."""

    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2025, 3, 1, 9, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now += timedelta(**kwargs)
