"""Core app configuration, database and session credentials."""

from sakuraboard.core.config import get_access_config, get_settings, settings
from sakuraboard.core.database import get_db

__all__ = ["get_access_config", "get_settings", "settings", "get_db"]
