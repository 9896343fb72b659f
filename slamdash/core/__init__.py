"""Core app configuration and database."""

from slamdash.core.config import get_settings
from slamdash.core.database import get_db

__all__ = ["get_settings", "get_db"]
