"""SQLite storage for the region payload cache."""

from .connection import get_connection, init_db

__all__ = ["get_connection", "init_db"]
