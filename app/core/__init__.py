"""Core app configuration, database handles, errors and security primitives."""

from app.core.config import Settings, get_settings
from app.core.database import create_db_engine, create_session_factory

__all__ = ["Settings", "create_db_engine", "create_session_factory", "get_settings"]
