"""Account and identity schemas for the auth subsystem."""

from pydantic import BaseModel, ConfigDict, Field


class AccountRecord(BaseModel):
    """Verified account as returned by the credential store (never carries the hash)."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    email: str
    role: str
    active: bool = True


class CurrentUser(BaseModel):
    """Identity of the caller resolved from the session cookie."""

    model_config = ConfigDict(from_attributes=True)

    id: int = Field(..., description="User id bound to the session")
    username: str
    email: str
    role: str = Field(..., description="Account role (maximal privilege)")
