"""Per-call context supplied by the host."""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy.orm import Session

from stakemod.services.clock import current_block_height


@dataclass(frozen=True)
class CallContext:
    """Authenticated caller and the block height the call executes at.

    Attributes:
        caller: Identity resolved by the host's authentication layer.
        block_height: Value of the monotonic clock for this call.
    """

    caller: str
    block_height: int

    @classmethod
    def from_store(cls, db: Session, caller: str) -> CallContext:
        """Build a context using the store-held ``SystemClock``."""
        return cls(caller=caller, block_height=current_block_height(db))
