"""Appeal handling for finalized decisions."""

from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from stakemod.core.settings import Settings
from stakemod.models import Appeal, Classification, ModerationRequest, RequestStatus
from stakemod.services.errors import (
    AlreadyAppealedError,
    AppealPeriodExpiredError,
    InsufficientStakeError,
    InvalidStatusError,
    NotFoundError,
)
from stakemod.services.requests import RequestLedger
from stakemod.services.votes import VoteTally, parse_classification

logger = logging.getLogger(__name__)

__all__ = ["AppealManager"]


class AppealManager:
    """Opens appeals and records the appeal round of voting.

    Appeal votes are stored but never aggregated: ``APPEALED`` is a terminal
    state here and the outcome is reconciled by an external process.
    """

    def __init__(
        self,
        db: Session,
        settings: Settings,
        requests: RequestLedger,
        votes: VoteTally,
    ) -> None:
        self.db = db
        self.settings = settings
        self.requests = requests
        self.votes = votes

    def get(self, request_id: int) -> Appeal | None:
        """Return the appeal filed against a request, if any."""
        return self.db.get(Appeal, request_id)

    def submit_appeal(
        self,
        request_id: int,
        appellant: str,
        appeal_stake: int,
        block_height: int,
    ) -> Appeal:
        """Appeal a finalized decision.

        Raises:
            NotFoundError: If the request does not exist.
            InvalidStatusError: If the request is not approved.
            AlreadyAppealedError: If the request already has an appeal.
            AppealPeriodExpiredError: If the appeal deadline has passed.
            InsufficientStakeError: If ``appeal_stake`` is below the minimum.
        """
        request = self.requests.require(request_id)
        if request.status != RequestStatus.APPROVED:
            raise InvalidStatusError(f"Request {request_id} has no decision open to appeal")
        if self.get(request_id) is not None:
            raise AlreadyAppealedError(f"Request {request_id} was already appealed")
        if block_height > request.appeal_deadline:
            raise AppealPeriodExpiredError(
                f"Appeal window for request {request_id} closed at {request.appeal_deadline}"
            )
        self._check_stake(appeal_stake)

        appeal = Appeal(
            request_id=request_id,
            appellant=appellant,
            appeal_stake=appeal_stake,
            appealed_at=block_height,
            original_classification=request.final_classification,
            new_classification=Classification.NONE,
        )
        self.db.add(appeal)
        request.status = RequestStatus.APPEALED

        logger.info("Appeal filed on request %d by %s with stake %d", request_id, appellant, appeal_stake)
        return appeal

    def vote_on_appeal(
        self,
        request_id: int,
        moderator: str,
        classification: int,
        stake: int,
        block_height: int,
    ) -> None:
        """Record an appeal-round vote.

        The vote slot is the same one used by the content round, so moderators
        who voted on the original request cannot vote on its appeal.

        Raises:
            NotFoundError: If the request has no appeal.
            InvalidStatusError: If the request is not in the appealed state.
            InsufficientStakeError: If ``stake`` is below the appeal minimum.
            AlreadyVotedError: If the moderator's vote slot is taken.
            InvalidClassificationError: If ``classification`` is out of range.
        """
        if self.get(request_id) is None:
            raise NotFoundError(f"No appeal for request {request_id}")
        request = self.requests.require(request_id)
        if request.status != RequestStatus.APPEALED:
            raise InvalidStatusError(f"Request {request_id} is not under appeal")
        self._check_stake(stake)
        self.votes.ensure_slot_free(request_id, moderator)
        choice = parse_classification(classification)

        self.votes.record_appeal_vote(request, moderator, choice, stake, block_height)

    def _check_stake(self, stake: int) -> None:
        if stake < self.settings.min_appeal_stake:
            raise InsufficientStakeError(
                f"Appeal stake {stake} is below the minimum of {self.settings.min_appeal_stake}"
            )

    def open_appeals(self) -> list[ModerationRequest]:
        """Return requests waiting on external appeal reconciliation."""
        return list(
            self.db.query(ModerationRequest)
            .filter(ModerationRequest.status == RequestStatus.APPEALED)
            .order_by(ModerationRequest.id)
            .all()
        )
