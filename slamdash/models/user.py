"""ORM model for dashboard user accounts."""

from sqlalchemy import Boolean, Column, DateTime, Integer, String, func, true

from slamdash.models.base import Base


class User(Base):
    """
    User account checked at login.

    role: one of 'administrator', 'manager', 'analyst', 'viewer' (see services.roles).
    Inactive accounts fail verification even with the right password.
    """

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(255), nullable=False, unique=True, index=True)
    email = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(32), nullable=False, default="viewer")
    active = Column(Boolean, nullable=False, default=True, server_default=true())
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
