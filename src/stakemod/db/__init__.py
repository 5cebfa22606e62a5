"""Database configuration and utilities."""

from .session import Base, create_db_engine, create_session_factory
from .upsert import insert_if_absent, upsert

__all__ = ["Base", "create_db_engine", "create_session_factory", "insert_if_absent", "upsert"]
