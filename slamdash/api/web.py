"""Login wall: login form, credential submission, logout, and the protected dashboard entry."""

import html
from typing import Annotated

from fastapi import APIRouter, Depends, Form, status
from fastapi.responses import HTMLResponse, RedirectResponse

from slamdash.api.deps import (
    get_access_gate,
    get_app_settings,
    get_session_token,
    require_session,
)
from slamdash.core.config import Settings
from slamdash.core.exceptions import (
    AccessDenied,
    InvalidCredentials,
    StorageError,
    Unauthenticated,
)
from slamdash.core.security import PASSWORD_MAX_LEN, USERNAME_MAX_LEN
from slamdash.services.access import AccessGate
from slamdash.services.roles import AccessLevel

router = APIRouter()

LOGIN_PATH = "/login"
DASHBOARD_PATH = "/dashboard"

# Option labels shown on the login form, highest privilege first.
ACCESS_GROUP_LABELS: dict[AccessLevel, str] = {
    AccessLevel.ADMINISTRATOR: "Administrator",
    AccessLevel.MANAGER: "License Manager",
    AccessLevel.ANALYST: "Asset Analyst",
    AccessLevel.VIEWER: "Viewer",
}

LOGIN_PAGE = """<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <title>SL&amp;AM Login</title>
</head>
<body>
    <h1>SL&amp;AM</h1>
    <p>Software License &amp; Asset Management</p>
    {alert}
    <form method="POST" action="/authenticate">
        <label for="username">Username</label>
        <input type="text" id="username" name="username" required>
        <label for="password">Password</label>
        <input type="password" id="password" name="password" required>
        <label for="role">Access Group</label>
        <select id="role" name="role" required>
            <option value="">Select Access Group</option>
{options}
        </select>
        <button type="submit">Login</button>
    </form>
</body>
</html>
"""

DASHBOARD_PAGE = """<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <title>SL&amp;AM Dashboard</title>
</head>
<body>
    <h1>Dashboard</h1>
    <p>Signed in as {username}.</p>
    <a href="/logout">Logout</a>
</body>
</html>
"""


def render_login(error: str | None = None, status_code: int = status.HTTP_200_OK) -> HTMLResponse:
    """Login form, optionally with a generic error banner."""
    alert = f'<div class="alert">{html.escape(error)}</div>' if error else ""
    options = "\n".join(
        f'            <option value="{level.value}">{label}</option>'
        for level, label in ACCESS_GROUP_LABELS.items()
    )
    return HTMLResponse(LOGIN_PAGE.format(alert=alert, options=options), status_code=status_code)


def _redirect(url: str) -> RedirectResponse:
    return RedirectResponse(url=url, status_code=status.HTTP_303_SEE_OTHER)


@router.get("/", response_class=HTMLResponse, include_in_schema=False)
@router.get(LOGIN_PATH, response_class=HTMLResponse)
def login_page() -> HTMLResponse:
    return render_login()


@router.get("/authenticate", include_in_schema=False)
def authenticate_get() -> RedirectResponse:
    """Credentials are only accepted by POST."""
    return _redirect(LOGIN_PATH)


@router.post("/authenticate", response_model=None)
def authenticate(
    gate: Annotated[AccessGate, Depends(get_access_gate)],
    settings: Annotated[Settings, Depends(get_app_settings)],
    username: Annotated[str, Form()] = "",
    password: Annotated[str, Form()] = "",
    role: Annotated[str, Form()] = "",
) -> HTMLResponse | RedirectResponse:
    """
    Log in as the requested access group and set the session cookie.

    Every credential failure renders the same message; a role too low for the
    requested group gets its own message. No cookie is set unless a session was stored.
    """
    if not username or len(username) > USERNAME_MAX_LEN or len(password) > PASSWORD_MAX_LEN:
        return render_login("Invalid credentials", status.HTTP_401_UNAUTHORIZED)
    try:
        token = gate.login(username, password, role)
    except InvalidCredentials:
        return render_login("Invalid credentials", status.HTTP_401_UNAUTHORIZED)
    except AccessDenied:
        return render_login("Access denied for selected group", status.HTTP_403_FORBIDDEN)
    except StorageError:
        return render_login("Failed to create session", status.HTTP_500_INTERNAL_SERVER_ERROR)

    response = _redirect(DASHBOARD_PATH)
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=token,
        max_age=int(gate.sessions.ttl.total_seconds()),
        path="/",
        secure=settings.SESSION_COOKIE_SECURE,
        httponly=True,
        samesite="lax",
    )
    return response


@router.api_route("/logout", methods=["GET", "POST"], include_in_schema=False)
def logout(
    token: Annotated[str | None, Depends(get_session_token)],
    gate: Annotated[AccessGate, Depends(get_access_gate)],
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> RedirectResponse:
    """Delete the session server-side, expire the cookie, and go back to the login form."""
    gate.logout(token)
    response = _redirect(LOGIN_PATH)
    response.delete_cookie(
        key=settings.SESSION_COOKIE_NAME,
        path="/",
        secure=settings.SESSION_COOKIE_SECURE,
        httponly=True,
        samesite="lax",
    )
    return response


@router.get(DASHBOARD_PATH, response_class=HTMLResponse)
def dashboard(
    user_id: Annotated[int, Depends(require_session)],
    gate: Annotated[AccessGate, Depends(get_access_gate)],
) -> HTMLResponse:
    """Placeholder landing page behind the login wall."""
    account = gate.credentials.get_account(user_id)
    if account is None:
        raise Unauthenticated()
    return HTMLResponse(DASHBOARD_PAGE.format(username=html.escape(account.username)))
