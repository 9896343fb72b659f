"""SQLAlchemy ORM models."""

from slamdash.models.base import Base
from slamdash.models.session import UserSession
from slamdash.models.user import User

__all__ = ["Base", "User", "UserSession"]
