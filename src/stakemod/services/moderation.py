"""Moderation services for Stakemod.

``ModerationService`` is the operation surface hosts call. Each mutating
operation runs in one transaction: it commits when every precondition holds
and rolls back entirely when any of them fails.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterator, Mapping
from contextlib import contextmanager

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from stakemod.core.settings import Settings
from stakemod.core.settings import settings as default_settings
from stakemod.models import Classification
from stakemod.schemas.moderation import (
    AppealInfo,
    LedgerEvent,
    ModerationRequestInfo,
    ModeratorReputationInfo,
    ModeratorVoteInfo,
    PlatformInfo,
)
from stakemod.services.appeals import AppealManager
from stakemod.services.context import CallContext
from stakemod.services.errors import (
    AlreadyAppealedError,
    AlreadyVotedError,
    ModerationError,
    OwnerOnlyError,
)
from stakemod.services.expertise import ExpertiseTable
from stakemod.services.ledger import get_ledger_page
from stakemod.services.platforms import PlatformRegistry
from stakemod.services.reputation import ReputationTracker
from stakemod.services.requests import RequestLedger
from stakemod.services.votes import VoteTally

logger = logging.getLogger(__name__)

_INSERT_TARGET = re.compile(r'\s*INSERT\s+INTO\s+"?(\w+)"?', re.IGNORECASE)


def conflicting_table(err: IntegrityError) -> str | None:
    """Return the table an INSERT was writing to when ``err`` was raised."""
    match = _INSERT_TARGET.match(err.statement or "")
    return match.group(1) if match else None


class ModerationService:
    """Service handling moderation operations and state transitions."""

    def __init__(self, db: Session, settings: Settings | None = None) -> None:
        self.db = db
        self.settings = settings or default_settings
        self.platforms = PlatformRegistry(db)
        self.expertise = ExpertiseTable(db, self.settings)
        self.reputation = ReputationTracker(db, self.settings)
        self.requests = RequestLedger(db, self.settings)
        self.votes = VoteTally(db, self.settings, self.expertise, self.reputation)
        self.appeals = AppealManager(db, self.settings, self.requests, self.votes)

    @contextmanager
    def _transaction(
        self,
        operation: str,
        conflicts: Mapping[str, type[ModerationError]] | None = None,
    ) -> Iterator[None]:
        """Commit the enclosed work, or roll all of it back on error.

        Args:
            operation: Name used in log messages.
            conflicts: Error to raise, per table, when a concurrent writer
                claimed the same primary key in that table first. Integrity
                errors on any other table propagate unchanged.
        """
        try:
            yield
            self.db.commit()
        except ModerationError as err:
            self.db.rollback()
            logger.debug("%s rejected: %s", operation, err.message)
            raise
        except IntegrityError as err:
            self.db.rollback()
            conflict = (conflicts or {}).get(conflicting_table(err))
            if conflict is None:
                raise
            logger.warning("%s lost a race on a unique key: %s", operation, err.orig)
            raise conflict() from err
        except Exception:
            self.db.rollback()
            raise

    # ------------------------------------------------------------------
    # Platform registry
    # ------------------------------------------------------------------

    def register_platform(self, ctx: CallContext, name: str) -> None:
        """Register (or re-register) the caller as a content platform."""
        with self._transaction("register_platform"):
            self.platforms.register(ctx.caller, name)

    def deactivate_platform(self, ctx: CallContext) -> None:
        """Stop the caller's platform from submitting new requests."""
        with self._transaction("deactivate_platform"):
            self.platforms.deactivate(ctx.caller)

    # ------------------------------------------------------------------
    # Request lifecycle
    # ------------------------------------------------------------------

    def submit_moderation_request(self, ctx: CallContext, content_digest: bytes) -> int:
        """Submit content for review and return the new request id."""
        with self._transaction("submit_moderation_request"):
            platform = self.platforms.require_active(ctx.caller)
            request = self.requests.submit(platform, ctx.caller, content_digest, ctx.block_height)
            request_id = request.id
        return request_id

    def vote_on_content(
        self,
        ctx: CallContext,
        request_id: int,
        classification: int,
        stake: int,
        region: str,
    ) -> None:
        """Back a classification of the request with a region-weighted stake."""
        with self._transaction("vote_on_content", conflicts={"moderator_vote": AlreadyVotedError}):
            request = self.requests.require(request_id)
            self.votes.vote_on_content(
                request,
                ctx.caller,
                classification,
                stake,
                region,
                ctx.block_height,
            )

    def finalize_decision(self, ctx: CallContext, request_id: int) -> Classification:
        """Close voting on the request and return the final classification."""
        with self._transaction("finalize_decision"):
            classification = self.requests.finalize(request_id, ctx.block_height)
        return classification

    # ------------------------------------------------------------------
    # Appeals
    # ------------------------------------------------------------------

    def submit_appeal(self, ctx: CallContext, request_id: int, appeal_stake: int) -> None:
        """Appeal a finalized decision within its appeal window."""
        with self._transaction("submit_appeal", conflicts={"appeal": AlreadyAppealedError}):
            self.appeals.submit_appeal(request_id, ctx.caller, appeal_stake, ctx.block_height)

    def vote_on_appeal(
        self,
        ctx: CallContext,
        request_id: int,
        classification: int,
        stake: int,
    ) -> None:
        """Vote in the appeal round of a request."""
        with self._transaction("vote_on_appeal", conflicts={"moderator_vote": AlreadyVotedError}):
            self.appeals.vote_on_appeal(
                request_id,
                ctx.caller,
                classification,
                stake,
                ctx.block_height,
            )

    # ------------------------------------------------------------------
    # Expertise and reputation
    # ------------------------------------------------------------------

    def set_regional_expertise(self, ctx: CallContext, region: str, weight: int) -> None:
        """Declare the caller's expertise weight for a region."""
        with self._transaction("set_regional_expertise"):
            self.expertise.set(ctx.caller, region, weight)

    def record_correct_decision(self, ctx: CallContext, moderator: str) -> None:
        """Credit a moderator with a correct decision (owner only)."""
        with self._transaction("record_correct_decision"):
            if ctx.caller != self.settings.owner_identity:
                raise OwnerOnlyError(f"{ctx.caller} is not the engine owner")
            self.reputation.record_correct_decision(moderator)

    # ------------------------------------------------------------------
    # Read-only operations
    # ------------------------------------------------------------------

    def get_moderation_request(self, request_id: int) -> ModerationRequestInfo | None:
        """Return the request, or None if it does not exist."""
        request = self.requests.get(request_id)
        return ModerationRequestInfo.model_validate(request) if request else None

    def get_moderator_reputation(self, moderator: str) -> ModeratorReputationInfo | None:
        """Return the moderator's reputation, or None before their first vote."""
        reputation = self.reputation.get(moderator)
        return ModeratorReputationInfo.model_validate(reputation) if reputation else None

    def get_platform_info(self, identity: str) -> PlatformInfo | None:
        """Return a platform record, or None if never registered."""
        platform = self.platforms.get(identity)
        return PlatformInfo.model_validate(platform) if platform else None

    def get_moderator_vote(self, request_id: int, moderator: str) -> ModeratorVoteInfo | None:
        """Return the moderator's vote on a request, or None."""
        vote = self.votes.get(request_id, moderator)
        return ModeratorVoteInfo.model_validate(vote) if vote else None

    def get_appeal(self, request_id: int) -> AppealInfo | None:
        """Return the appeal on a request, or None."""
        appeal = self.appeals.get(request_id)
        return AppealInfo.model_validate(appeal) if appeal else None

    def get_regional_expertise(self, moderator: str, region: str) -> int | None:
        """Return the declared regional weight, or None (callers assume 50)."""
        return self.expertise.get(moderator, region)

    def get_moderator_accuracy(self, moderator: str) -> int:
        """Return the moderator's accuracy percentage."""
        return self.reputation.accuracy(moderator)

    def get_next_request_id(self) -> int:
        """Return the id the next submitted request will receive."""
        return self.requests.next_request_id()

    def get_platform_count(self) -> int:
        """Return the number of distinct platforms ever registered."""
        return self.platforms.count()

    def get_request_votes(
        self,
        request_id: int,
        is_appeal: bool | None = None,
    ) -> list[ModeratorVoteInfo]:
        """Return every vote on a request, optionally filtered by round."""
        return [
            ModeratorVoteInfo.model_validate(vote)
            for vote in self.votes.list_for_request(request_id, is_appeal=is_appeal)
        ]

    def get_open_appeals(self) -> list[ModerationRequestInfo]:
        """Return appealed requests awaiting external reconciliation."""
        return [ModerationRequestInfo.model_validate(r) for r in self.appeals.open_appeals()]

    def ledger_events(
        self,
        request_id: int | None = None,
        limit: int = 50,
        before: int | None = None,
    ) -> list[LedgerEvent]:
        """Return the moderation activity feed, newest first."""
        return get_ledger_page(self.db, request_id=request_id, limit=limit, before=before)
