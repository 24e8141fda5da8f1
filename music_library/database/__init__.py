"""Database extension, models and lifecycle helpers."""

from .db_manager import Song, db, drop_database, initialize_database, utcnow

__all__ = ["Song", "db", "drop_database", "initialize_database", "utcnow"]
