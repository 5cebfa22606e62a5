"""Moderator reputation tracking."""

from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from stakemod.core.settings import Settings
from stakemod.db.upsert import insert_if_absent
from stakemod.models import ModeratorReputation
from stakemod.services.errors import NotFoundError

logger = logging.getLogger(__name__)

__all__ = ["ReputationTracker"]


class ReputationTracker:
    """Keeps decision counts and stake totals per moderator.

    Correct decisions are never derived here; an external grading process
    reports them through ``record_correct_decision``.
    """

    def __init__(self, db: Session, settings: Settings) -> None:
        self.db = db
        self.settings = settings

    def get(self, moderator: str) -> ModeratorReputation | None:
        """Return the moderator's reputation record, if any."""
        return self.db.get(ModeratorReputation, moderator)

    def accuracy(self, moderator: str) -> int:
        """Return the moderator's accuracy percentage, 0 without decisions."""
        reputation = self.get(moderator)
        return reputation.accuracy if reputation else 0

    def record_decision(self, moderator: str, stake: int) -> ModeratorReputation:
        """Count a content vote and add its raw stake to the moderator's total."""
        insert_if_absent(
            self.db,
            ModeratorReputation,
            {
                "moderator": moderator,
                "total_decisions": 0,
                "correct_decisions": 0,
                "total_stake": 0,
                "regional_weight": self.settings.default_regional_weight,
            },
        )
        reputation = self.db.get(
            ModeratorReputation,
            moderator,
            with_for_update=True,
            populate_existing=True,
        )
        reputation.total_decisions += 1
        reputation.total_stake += stake
        return reputation

    def record_correct_decision(self, moderator: str) -> ModeratorReputation:
        """Credit one correct decision to the moderator.

        Raises:
            NotFoundError: If the moderator has never voted.
        """
        reputation = self.db.get(
            ModeratorReputation,
            moderator,
            with_for_update=True,
            populate_existing=True,
        )
        if reputation is None:
            raise NotFoundError(f"No reputation record for {moderator}")

        reputation.correct_decisions += 1
        logger.info(
            "Graded decision for %s: %d/%d correct",
            moderator,
            reputation.correct_decisions,
            reputation.total_decisions,
        )
        return reputation
