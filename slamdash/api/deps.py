"""Request dependencies: app-owned services and the session-cookie gate."""

from typing import Annotated

from fastapi import Depends, Request

from slamdash.core.config import Settings
from slamdash.core.exceptions import Unauthenticated
from slamdash.services.access import AccessGate


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_access_gate(request: Request) -> AccessGate:
    return request.app.state.access_gate


def get_session_token(
    request: Request,
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> str | None:
    """Session token from the cookie, or None."""
    return request.cookies.get(settings.SESSION_COOKIE_NAME) or None


def require_session(
    token: Annotated[str | None, Depends(get_session_token)],
    gate: Annotated[AccessGate, Depends(get_access_gate)],
) -> int:
    """
    Dependency: return the authenticated user id.

    Raises Unauthenticated (rendered as a redirect to /login) when the cookie is
    missing, unknown or expired; the wrapped handler is not called.
    """
    user_id = gate.authenticate(token)
    if user_id is None:
        raise Unauthenticated()
    return user_id
