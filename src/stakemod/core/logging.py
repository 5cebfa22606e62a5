"""Logging setup for hosts embedding the engine."""

from __future__ import annotations

import logging
import sys

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str | None = None) -> None:
    """Attach a stream handler to the root logger.

    Args:
        level: Log level name; defaults to ``settings.log_level``.
    """
    from stakemod.core.settings import settings

    log_level = getattr(logging, (level or settings.log_level).upper(), logging.INFO)

    root = logging.getLogger()
    root.handlers.clear()
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(handler)
    root.setLevel(log_level)

    # SQLAlchemy engine logging is controlled by SQL_DEBUG instead.
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
