"""Pydantic request/response schemas."""

from slamdash.schemas.auth import AccountRecord, CurrentUser
from slamdash.schemas.health import HealthResponse

__all__ = [
    "AccountRecord",
    "CurrentUser",
    "HealthResponse",
]
