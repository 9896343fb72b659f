"""FastAPI application entrypoint. No business logic; only wiring and middleware."""

from dotenv import load_dotenv

load_dotenv()

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import timedelta

from fastapi import FastAPI, Request, status
from fastapi.responses import PlainTextResponse, RedirectResponse
from sqlalchemy.engine import Engine

from slamdash.api import web
from slamdash.api.v1 import router as v1_router
from slamdash.core.config import Settings, get_settings
from slamdash.core.database import create_db_engine, create_session_factory, init_db
from slamdash.core.exceptions import StorageError, Unauthenticated
from slamdash.services.access import AccessGate
from slamdash.services.credentials import CredentialStore
from slamdash.services.sessions import SessionManager

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None, engine: Engine | None = None) -> FastAPI:
    """
    Build the application and its services.

    The app owns (and disposes) the engine it creates; an engine passed in stays
    owned by the caller. Services share one session factory.
    """
    settings = settings or get_settings()
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%SZ",
    )

    owns_engine = engine is None
    if engine is None:
        engine = create_db_engine(settings.DATABASE_URL, echo=settings.DEBUG)
    session_factory = create_session_factory(engine)
    credentials = CredentialStore(session_factory, bcrypt_rounds=settings.BCRYPT_ROUNDS)
    sessions = SessionManager(session_factory, ttl=timedelta(hours=settings.SESSION_TTL_HOURS))
    access_gate = AccessGate(credentials, sessions)

    @asynccontextmanager
    async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
        if settings.DB_CREATE_TABLES:
            init_db(engine)
        credentials.bootstrap(
            settings.BOOTSTRAP_ADMIN_USERNAME,
            settings.BOOTSTRAP_ADMIN_EMAIL,
            settings.BOOTSTRAP_ADMIN_PASSWORD.get_secret_value(),
        )
        yield
        if owns_engine:
            engine.dispose()

    app = FastAPI(
        title="SL&AM Dashboard",
        version="0.1.0",
        docs_url="/docs" if settings.APP_ENV == "dev" else None,
        redoc_url=None,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.session_factory = session_factory
    app.state.credentials = credentials
    app.state.sessions = sessions
    app.state.access_gate = access_gate

    @app.exception_handler(Unauthenticated)
    async def redirect_to_login(_request: Request, _exc: Unauthenticated) -> RedirectResponse:
        return RedirectResponse(url=web.LOGIN_PATH, status_code=status.HTTP_303_SEE_OTHER)

    @app.exception_handler(StorageError)
    async def storage_error(_request: Request, _exc: StorageError) -> PlainTextResponse:
        # Already logged where it was raised.
        return PlainTextResponse(
            "Internal Server Error",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    app.include_router(web.router)
    app.include_router(v1_router, prefix=settings.API_V1_PREFIX)
    return app


app = create_app()


def run_server(settings: Settings | None = None) -> None:
    """Serve the app with uvicorn (development entry point)."""
    import uvicorn

    settings = settings or get_settings()
    uvicorn.run(
        "slamdash.main:app",
        host=settings.SERVER_HOST,
        port=settings.SERVER_PORT,
        reload=settings.APP_ENV == "dev" and settings.DEBUG,
    )


if __name__ == "__main__":
    run_server()
