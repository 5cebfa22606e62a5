"""Database session configuration."""

from __future__ import annotations

from typing import Any

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from stakemod.core.settings import settings


class Base(DeclarativeBase):
    """Declarative base shared by all ORM models."""


# Ensure model modules are imported so that metadata is populated when create_all runs.
import stakemod.models  # noqa: E402,F401


def create_db_engine(url: str | None = None, **kwargs: Any) -> Engine:
    """Build an engine for ``url``, defaulting to ``settings.database_url``.

    Extra keyword arguments are passed to ``create_engine`` (pool class,
    connect args).
    """
    return create_engine(
        url or settings.database_url,
        pool_pre_ping=True,
        echo=settings.sql_debug,
        **kwargs,
    )


def create_session_factory(bind: Engine, **kwargs: Any) -> sessionmaker[Session]:
    """Return a session factory with autoflush disabled.

    Services flush explicitly at commit, so every write of an operation lands
    in one flush inside its transaction.
    """
    return sessionmaker(bind=bind, autocommit=False, autoflush=False, **kwargs)
