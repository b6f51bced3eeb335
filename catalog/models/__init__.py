"""SQLAlchemy ORM models."""

from catalog.models.base import Base
from catalog.models.service import Service
from catalog.models.user import User

__all__ = ["Base", "Service", "User"]
