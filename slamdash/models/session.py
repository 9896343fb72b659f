"""ORM model for opaque login sessions."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String

from slamdash.models.base import Base


class UserSession(Base):
    """
    One row per issued session token. The token itself is the primary key.

    A row is valid only while now < expires_at; expired rows stay until purged
    and are still rejected.
    """

    __tablename__ = "sessions"

    id = Column(String(64), primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), nullable=False)
    expires_at = Column(DateTime(timezone=True), nullable=False, index=True)
