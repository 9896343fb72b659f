"""Identity endpoint for the dashboard front end."""

from typing import Annotated

from fastapi import APIRouter, Depends

from slamdash.api.deps import get_access_gate, require_session
from slamdash.core.exceptions import Unauthenticated
from slamdash.schemas.auth import CurrentUser
from slamdash.services.access import AccessGate

router = APIRouter()


@router.get("/me", response_model=CurrentUser)
def get_me(
    user_id: Annotated[int, Depends(require_session)],
    gate: Annotated[AccessGate, Depends(get_access_gate)],
) -> CurrentUser:
    """Return the account bound to the caller's session cookie."""
    account = gate.credentials.get_account(user_id)
    if account is None:
        raise Unauthenticated()
    return CurrentUser(
        id=account.id,
        username=account.username,
        email=account.email,
        role=account.role,
    )
