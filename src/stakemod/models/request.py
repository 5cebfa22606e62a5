"""Models tracking moderation requests and their state machine."""

from __future__ import annotations

from enum import IntEnum

from sqlalchemy import BigInteger, ForeignKey, LargeBinary, SmallInteger, Text
from sqlalchemy.orm import Mapped, mapped_column

from stakemod.db.session import Base

CONTENT_DIGEST_SIZE = 32


class RequestStatus(IntEnum):
    """Lifecycle states of a moderation request.

    ``REJECTED`` is part of the stored vocabulary but no operation assigns it.
    ``APPEALED`` is absorbing: appeal outcomes are reconciled externally.
    """

    PENDING = 0
    UNDER_REVIEW = 1
    APPROVED = 2
    REJECTED = 3
    APPEALED = 4


class Classification(IntEnum):
    """Violation categories moderators vote on."""

    NONE = 0
    SPAM = 1
    HARASSMENT = 2
    HATE_SPEECH = 3
    MISINFORMATION = 4
    EXPLICIT = 5


# Statuses in which content votes are still accepted.
VOTING_STATUSES = frozenset({RequestStatus.PENDING, RequestStatus.UNDER_REVIEW})


class ModerationRequest(Base):
    """A piece of platform content submitted for stake-weighted review."""

    __tablename__ = "moderation_request"

    # Allocated from LedgerCounter.next_request_id, starting at 0.
    id: Mapped[int] = mapped_column(BigInteger, primary_key=True, autoincrement=False)
    platform_id: Mapped[str] = mapped_column(
        Text,
        ForeignKey("platform.identity"),
        nullable=False,
    )
    content_digest: Mapped[bytes] = mapped_column(LargeBinary(CONTENT_DIGEST_SIZE), nullable=False)
    submitter: Mapped[str] = mapped_column(Text, nullable=False)
    status: Mapped[int] = mapped_column(SmallInteger, nullable=False, default=RequestStatus.PENDING)
    # Block height at submission.
    created_at: Mapped[int] = mapped_column(BigInteger, nullable=False)
    final_classification: Mapped[int] = mapped_column(
        SmallInteger,
        nullable=False,
        default=Classification.NONE,
    )
    # Sums of weighted stake (stake x regional weight).
    total_stake_for: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    total_stake_against: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    # Zero until the decision is finalized.
    appeal_deadline: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    # Block height of finalization; kept for the ledger feed.
    finalized_at: Mapped[int | None] = mapped_column(BigInteger, nullable=True)
