"""Models capturing moderator votes on requests."""

from sqlalchemy import BigInteger, Boolean, CheckConstraint, ForeignKey, Index, SmallInteger, Text
from sqlalchemy.orm import Mapped, mapped_column

from stakemod.db.session import Base


class ModeratorVote(Base):
    """A moderator's single vote on a request.

    The slot is shared by the content round and the appeal round, so a
    moderator gets exactly one vote per request over its whole lifetime.
    """

    __tablename__ = "moderator_vote"
    __table_args__ = (
        CheckConstraint("classification BETWEEN 0 AND 5", name="ck_moderator_vote_classification"),
        Index("ix_moderator_vote_request_id", "request_id"),
    )

    request_id: Mapped[int] = mapped_column(
        BigInteger,
        ForeignKey("moderation_request.id"),
        primary_key=True,
    )
    moderator: Mapped[str] = mapped_column(Text, primary_key=True)

    # Composite primary key prevents a second vote from the same moderator.

    classification: Mapped[int] = mapped_column(SmallInteger, nullable=False)
    # Content votes store stake x regional weight; appeal votes store raw stake.
    stake_amount: Mapped[int] = mapped_column(BigInteger, nullable=False)
    voted_at: Mapped[int] = mapped_column(BigInteger, nullable=False)
    is_appeal: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
