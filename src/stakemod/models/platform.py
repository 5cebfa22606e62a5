"""SQLAlchemy models for registered content platforms."""

from sqlalchemy import BigInteger, Boolean, Text
from sqlalchemy.orm import Mapped, mapped_column

from stakemod.db.session import Base


class Platform(Base):
    """A content platform allowed to submit moderation requests."""

    __tablename__ = "platform"

    # Caller identity that registered the platform.
    identity: Mapped[str] = mapped_column(Text, primary_key=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    # Reset to zero on every re-registration.
    request_count: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
