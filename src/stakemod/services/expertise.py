"""Regional expertise table used to weight moderator stake."""

from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from stakemod.core.settings import Settings
from stakemod.db.upsert import upsert
from stakemod.models import MAX_REGIONAL_WEIGHT, MIN_REGIONAL_WEIGHT, RegionalExpertise
from stakemod.services.errors import InvalidClassificationError

logger = logging.getLogger(__name__)

__all__ = ["ExpertiseTable"]


class ExpertiseTable:
    """Per-moderator, per-region stake multipliers."""

    def __init__(self, db: Session, settings: Settings) -> None:
        self.db = db
        self.settings = settings

    def get(self, moderator: str, region: str) -> int | None:
        """Return the declared weight, or None when nothing was declared."""
        entry = self.db.get(RegionalExpertise, (moderator, region))
        return entry.weight if entry else None

    def weight_for(self, moderator: str, region: str) -> int:
        """Return the weight to apply to a stake, falling back to the default."""
        weight = self.get(moderator, region)
        if weight is None:
            return self.settings.default_regional_weight
        return weight

    def set(self, moderator: str, region: str, weight: int) -> RegionalExpertise:
        """Upsert the moderator's weight for a region.

        Raises:
            InvalidClassificationError: If ``weight`` is outside the allowed
                range. The code is shared with classification checks.
        """
        if not MIN_REGIONAL_WEIGHT <= weight <= MAX_REGIONAL_WEIGHT:
            raise InvalidClassificationError(
                f"Regional weight must be between {MIN_REGIONAL_WEIGHT} and {MAX_REGIONAL_WEIGHT}"
            )

        upsert(
            self.db,
            RegionalExpertise,
            {"moderator": moderator, "region": region, "weight": weight},
            {"weight": weight},
        )
        entry = self.db.get(RegionalExpertise, (moderator, region), populate_existing=True)

        logger.debug("Regional weight for %s in %s set to %d", moderator, region, weight)
        return entry
