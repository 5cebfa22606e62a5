"""Per-moderator reputation bookkeeping."""

from sqlalchemy import BigInteger, SmallInteger, Text
from sqlalchemy.orm import Mapped, mapped_column

from stakemod.db.session import Base


class ModeratorReputation(Base):
    """Decision counts and stake totals for a moderator."""

    __tablename__ = "moderator_reputation"

    moderator: Mapped[str] = mapped_column(Text, primary_key=True)
    total_decisions: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    # Only written by the external grading hook.
    correct_decisions: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    # Raw stake, not weighted.
    total_stake: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    regional_weight: Mapped[int] = mapped_column(SmallInteger, nullable=False, default=50)

    @property
    def accuracy(self) -> int:
        """Return the integer percentage of decisions graded correct."""
        if not self.total_decisions:
            return 0
        return self.correct_decisions * 100 // self.total_decisions
