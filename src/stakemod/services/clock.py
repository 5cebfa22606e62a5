"""Access to the store-held clock and counters."""

from __future__ import annotations

from sqlalchemy.orm import Session

from stakemod.db.upsert import insert_if_absent
from stakemod.models import LedgerCounter, SystemClock


def get_system_clock(db: Session, *, for_update: bool = False) -> SystemClock:
    """Get or create the system clock entry.

    Args:
        db: Database session
        for_update: Lock the row for the rest of the transaction

    Returns:
        SystemClock object
    """
    clock = db.get(SystemClock, 1, with_for_update=for_update, populate_existing=for_update)
    if clock is None:
        insert_if_absent(db, SystemClock, {"id": 1, "block_height": 0})
        clock = db.get(SystemClock, 1, with_for_update=for_update, populate_existing=True)
    return clock


def current_block_height(db: Session) -> int:
    """Return the current block height held by the store."""
    return int(get_system_clock(db).block_height)


def advance_block_height(db: Session, blocks: int = 1) -> int:
    """Move the store-held clock forward and return the new height.

    Raises:
        ValueError: If ``blocks`` is negative; the clock never goes backwards.
    """
    if blocks < 0:
        raise ValueError("block height is monotonic")
    clock = get_system_clock(db, for_update=True)
    clock.block_height += blocks
    db.commit()
    return int(clock.block_height)


def get_ledger_counter(db: Session, *, for_update: bool = False) -> LedgerCounter:
    """Get or create the shared counter row.

    Args:
        db: Database session
        for_update: Lock the row for the rest of the transaction
    """
    counter = db.get(LedgerCounter, 1, with_for_update=for_update, populate_existing=for_update)
    if counter is None:
        insert_if_absent(db, LedgerCounter, {"id": 1, "next_request_id": 0, "platform_count": 0})
        counter = db.get(LedgerCounter, 1, with_for_update=for_update, populate_existing=True)
    return counter
