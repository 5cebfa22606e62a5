"""Request ledger: creation and finalization of moderation requests."""

from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from stakemod.core.settings import Settings
from stakemod.models import (
    CONTENT_DIGEST_SIZE,
    Classification,
    ModerationRequest,
    Platform,
    RequestStatus,
)
from stakemod.services.clock import get_ledger_counter
from stakemod.services.errors import InvalidStatusError, NotFoundError

logger = logging.getLogger(__name__)

__all__ = ["RequestLedger"]

# Finalize records whether a violation occurred, not which category won the vote.
VIOLATION_CLASSIFICATION = Classification.HARASSMENT


class RequestLedger:
    """Owns the moderation request state machine."""

    def __init__(self, db: Session, settings: Settings) -> None:
        self.db = db
        self.settings = settings

    def get(self, request_id: int, *, for_update: bool = False) -> ModerationRequest | None:
        """Return a request by id."""
        return self.db.get(
            ModerationRequest,
            request_id,
            with_for_update=for_update,
            populate_existing=for_update,
        )

    def require(self, request_id: int) -> ModerationRequest:
        """Return the request locked for update.

        Raises:
            NotFoundError: If no request has that id.
        """
        request = self.get(request_id, for_update=True)
        if request is None:
            raise NotFoundError(f"Moderation request {request_id} not found")
        return request

    def next_request_id(self) -> int:
        """Return the id the next submission will receive."""
        return int(get_ledger_counter(self.db).next_request_id)

    def submit(
        self,
        platform: Platform,
        submitter: str,
        content_digest: bytes,
        block_height: int,
    ) -> ModerationRequest:
        """Create a pending request for ``content_digest``.

        Args:
            platform: Active platform submitting the content, already locked.
            submitter: Caller identity.
            content_digest: 32-byte digest identifying the content.
            block_height: Current clock value.

        Raises:
            ValueError: If the digest is not a bytes-like value of exactly 32 bytes.
        """
        if not isinstance(content_digest, (bytes, bytearray, memoryview)):
            raise ValueError(f"Content digest must be bytes, not {type(content_digest).__name__}")
        digest = bytes(content_digest)
        if len(digest) != CONTENT_DIGEST_SIZE:
            raise ValueError(f"Content digest must be {CONTENT_DIGEST_SIZE} bytes")

        counter = get_ledger_counter(self.db, for_update=True)
        request_id = int(counter.next_request_id)
        counter.next_request_id = request_id + 1

        request = ModerationRequest(
            id=request_id,
            platform_id=platform.identity,
            content_digest=digest,
            submitter=submitter,
            status=RequestStatus.PENDING,
            created_at=block_height,
            final_classification=Classification.NONE,
            total_stake_for=0,
            total_stake_against=0,
            appeal_deadline=0,
        )
        self.db.add(request)
        platform.request_count += 1

        logger.info("Request %d submitted by platform %s", request_id, platform.identity)
        return request

    def finalize(self, request_id: int, block_height: int) -> Classification:
        """Close voting on a request and open its appeal window.

        Raises:
            NotFoundError: If the request does not exist.
            InvalidStatusError: If the request is not under review.
        """
        request = self.require(request_id)
        if request.status != RequestStatus.UNDER_REVIEW:
            raise InvalidStatusError(
                f"Request {request_id} is {RequestStatus(request.status).name.lower()}, not under review"
            )

        if request.total_stake_for > request.total_stake_against:
            classification = VIOLATION_CLASSIFICATION
        else:
            classification = Classification.NONE

        request.status = RequestStatus.APPROVED
        request.final_classification = classification
        request.appeal_deadline = block_height + self.settings.appeal_window
        request.finalized_at = block_height

        logger.info(
            "Request %d finalized as %s (for=%d, against=%d); appeals open until %d",
            request_id,
            classification.name.lower(),
            request.total_stake_for,
            request.total_stake_against,
            request.appeal_deadline,
        )
        return classification
