"""System-level bookkeeping models."""

from sqlalchemy import BigInteger
from sqlalchemy.orm import Mapped, mapped_column

from stakemod.db.session import Base


class SystemClock(Base):
    """Monotonic block-height counter used for timestamps and deadlines.

    Hosts that track height themselves pass it in the call context instead.
    """

    __tablename__ = "system_clock"

    id: Mapped[int] = mapped_column(BigInteger, primary_key=True, default=1)
    block_height: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)


class LedgerCounter(Base):
    """Exclusive-increment counters shared by all operations."""

    __tablename__ = "ledger_counter"

    id: Mapped[int] = mapped_column(BigInteger, primary_key=True, default=1)
    next_request_id: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    platform_count: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
