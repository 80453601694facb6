"""Core configuration, database, tokens, identity and permission rules."""

from simple_notes.core.config import get_settings, settings
from simple_notes.core.database import get_db

__all__ = ["get_settings", "settings", "get_db"]
