"""Declarative Base shared by the users and sessions tables."""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass
