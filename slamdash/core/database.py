"""Engine and session-factory construction. The process owns the engine; services borrow the factory."""

from collections.abc import Generator

from fastapi import Request
from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from slamdash.models import Base

IN_MEMORY_SQLITE_URLS = frozenset({"sqlite://", "sqlite:///:memory:"})


def create_db_engine(url: str, echo: bool = False) -> Engine:
    """Create an engine for url; SQLite gets thread-shareable connections."""
    kwargs: dict = {"pool_pre_ping": True, "echo": echo}
    if url.startswith("sqlite"):
        # Sync route handlers run on a threadpool.
        kwargs["connect_args"] = {"check_same_thread": False}
        if url in IN_MEMORY_SQLITE_URLS:
            # One shared connection, otherwise every checkout sees an empty database.
            kwargs["poolclass"] = StaticPool
    return create_engine(url, **kwargs)


def create_session_factory(engine: Engine) -> sessionmaker[Session]:
    """Session factory shared by all services; each operation opens its own short session."""
    return sessionmaker(
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
        bind=engine,
    )


def init_db(engine: Engine) -> None:
    """Create missing tables. Idempotent."""
    Base.metadata.create_all(engine)


def get_db(request: Request) -> Generator[Session, None, None]:
    """Dependency that yields a DB session from the app's factory and closes it when done."""
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()


def check_db_connected(db: Session) -> bool:
    """Run a trivial query to verify the database is reachable."""
    try:
        db.execute(text("SELECT 1"))
        return True
    except Exception:
        return False
