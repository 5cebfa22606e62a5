"""Dialect-specific INSERT ... ON CONFLICT helpers.

Rows keyed by caller identity (platforms, reputation, expertise) can be
created by two callers at once; ``SELECT ... FOR UPDATE`` cannot lock a row
that does not exist yet, so creation goes through the database's own
conflict handling instead.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.orm import Session

_DIALECT_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


def _insert_for(db: Session, model: type) -> Any:
    dialect = db.get_bind().dialect.name
    try:
        insert = _DIALECT_INSERTS[dialect]
    except KeyError:
        raise NotImplementedError(f"ON CONFLICT inserts are not supported on {dialect}") from None
    return insert(model.__table__)


def _key_columns(model: type) -> list[str]:
    return [column.name for column in model.__table__.primary_key]


def insert_if_absent(db: Session, model: type, values: Mapping[str, Any]) -> bool:
    """Insert a row unless its primary key already exists.

    Returns:
        True when this call created the row.
    """
    stmt = _insert_for(db, model).values(**values).on_conflict_do_nothing(
        index_elements=_key_columns(model),
    )
    return db.execute(stmt).rowcount == 1


def upsert(db: Session, model: type, values: Mapping[str, Any], update: Mapping[str, Any]) -> None:
    """Insert a row, or apply ``update`` to the row holding the same primary key."""
    stmt = _insert_for(db, model).values(**values).on_conflict_do_update(
        index_elements=_key_columns(model),
        set_=dict(update),
    )
    db.execute(stmt)
