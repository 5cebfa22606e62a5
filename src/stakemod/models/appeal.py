"""Appeals filed against finalized decisions."""

from sqlalchemy import BigInteger, ForeignKey, SmallInteger, Text
from sqlalchemy.orm import Mapped, mapped_column

from stakemod.db.session import Base

from .request import Classification


class Appeal(Base):
    """At most one appeal per request, keyed by the request id."""

    __tablename__ = "appeal"

    request_id: Mapped[int] = mapped_column(
        BigInteger,
        ForeignKey("moderation_request.id"),
        primary_key=True,
    )
    appellant: Mapped[str] = mapped_column(Text, nullable=False)
    appeal_stake: Mapped[int] = mapped_column(BigInteger, nullable=False)
    appealed_at: Mapped[int] = mapped_column(BigInteger, nullable=False)
    original_classification: Mapped[int] = mapped_column(SmallInteger, nullable=False)
    # Left at NONE; the appeal outcome is reconciled outside the engine.
    new_classification: Mapped[int] = mapped_column(
        SmallInteger,
        nullable=False,
        default=Classification.NONE,
    )
