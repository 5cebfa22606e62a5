"""Declared regional expertise of moderators."""

from sqlalchemy import CheckConstraint, SmallInteger, Text
from sqlalchemy.orm import Mapped, mapped_column

from stakemod.db.session import Base

MIN_REGIONAL_WEIGHT = 1
MAX_REGIONAL_WEIGHT = 100


class RegionalExpertise(Base):
    """Stake multiplier a moderator declares for one region."""

    __tablename__ = "regional_expertise"
    __table_args__ = (
        CheckConstraint(
            f"weight BETWEEN {MIN_REGIONAL_WEIGHT} AND {MAX_REGIONAL_WEIGHT}",
            name="ck_regional_expertise_weight",
        ),
    )

    moderator: Mapped[str] = mapped_column(Text, primary_key=True)
    region: Mapped[str] = mapped_column(Text, primary_key=True)
    weight: Mapped[int] = mapped_column(SmallInteger, nullable=False)
