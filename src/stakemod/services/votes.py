"""Vote tally: records content votes and folds weighted stake into requests."""

from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from stakemod.core.settings import Settings
from stakemod.models import (
    VOTING_STATUSES,
    Classification,
    ModerationRequest,
    ModeratorVote,
    RequestStatus,
)
from stakemod.services.errors import (
    AlreadyVotedError,
    InsufficientStakeError,
    InvalidClassificationError,
    InvalidStatusError,
)
from stakemod.services.expertise import ExpertiseTable
from stakemod.services.reputation import ReputationTracker

logger = logging.getLogger(__name__)

__all__ = ["VoteTally", "parse_classification"]


def parse_classification(value: int) -> Classification:
    """Convert a raw classification code.

    Raises:
        InvalidClassificationError: If the code is outside the enum range.
    """
    try:
        return Classification(value)
    except ValueError as err:
        raise InvalidClassificationError(f"Unknown classification {value}") from err


class VoteTally:
    """One vote slot per (request, moderator), shared by both voting rounds."""

    def __init__(
        self,
        db: Session,
        settings: Settings,
        expertise: ExpertiseTable,
        reputation: ReputationTracker,
    ) -> None:
        self.db = db
        self.settings = settings
        self.expertise = expertise
        self.reputation = reputation

    def get(self, request_id: int, moderator: str) -> ModeratorVote | None:
        """Return the moderator's vote on a request."""
        return self.db.get(ModeratorVote, (request_id, moderator))

    def list_for_request(self, request_id: int, is_appeal: bool | None = None) -> list[ModeratorVote]:
        """Return all votes on a request in casting order."""
        stmt = select(ModeratorVote).where(ModeratorVote.request_id == request_id)
        if is_appeal is not None:
            stmt = stmt.where(ModeratorVote.is_appeal.is_(is_appeal))
        stmt = stmt.order_by(ModeratorVote.voted_at, ModeratorVote.moderator)
        return list(self.db.scalars(stmt))

    def ensure_slot_free(self, request_id: int, moderator: str) -> None:
        """Raise AlreadyVotedError if the moderator already voted on the request."""
        if self.get(request_id, moderator) is not None:
            raise AlreadyVotedError(f"{moderator} already voted on request {request_id}")

    def vote_on_content(
        self,
        request: ModerationRequest,
        moderator: str,
        classification: int,
        stake: int,
        region: str,
        block_height: int,
    ) -> ModeratorVote:
        """Record a content vote and update the request's weighted totals.

        Any classification other than NONE counts toward ``total_stake_for``;
        NONE counts toward ``total_stake_against``.

        Raises:
            AlreadyVotedError: If the moderator already voted on the request.
            InsufficientStakeError: If ``stake`` is below the moderator minimum.
            InvalidStatusError: If voting on the request has closed.
            InvalidClassificationError: If ``classification`` is out of range.
        """
        self.ensure_slot_free(request.id, moderator)
        if stake < self.settings.min_moderator_stake:
            raise InsufficientStakeError(
                f"Stake {stake} is below the minimum of {self.settings.min_moderator_stake}"
            )
        if request.status not in VOTING_STATUSES:
            raise InvalidStatusError(f"Request {request.id} is no longer accepting votes")
        choice = parse_classification(classification)

        weight = self.expertise.weight_for(moderator, region)
        weighted_stake = stake * weight

        vote = ModeratorVote(
            request_id=request.id,
            moderator=moderator,
            classification=choice,
            stake_amount=weighted_stake,
            voted_at=block_height,
            is_appeal=False,
        )
        self.db.add(vote)

        if choice != Classification.NONE:
            request.total_stake_for += weighted_stake
        else:
            request.total_stake_against += weighted_stake
        request.status = RequestStatus.UNDER_REVIEW

        self.reputation.record_decision(moderator, stake)

        logger.debug(
            "Vote on request %d by %s: %s, stake %d x weight %d (region %s)",
            request.id,
            moderator,
            choice.name.lower(),
            stake,
            weight,
            region,
        )
        return vote

    def record_appeal_vote(
        self,
        request: ModerationRequest,
        moderator: str,
        classification: Classification,
        stake: int,
        block_height: int,
    ) -> ModeratorVote:
        """Store an appeal-round vote with its raw stake; no totals change."""
        vote = ModeratorVote(
            request_id=request.id,
            moderator=moderator,
            classification=classification,
            stake_amount=stake,
            voted_at=block_height,
            is_appeal=True,
        )
        self.db.add(vote)
        logger.debug(
            "Appeal vote on request %d by %s: %s, stake %d",
            request.id,
            moderator,
            classification.name.lower(),
            stake,
        )
        return vote
