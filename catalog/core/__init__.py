"""Core app configuration, database and security."""

from catalog.core.config import Settings, get_settings
from catalog.core.database import get_db

__all__ = ["Settings", "get_settings", "get_db"]
