"""Public moderation activity feed derived from stored records."""

from __future__ import annotations

from typing import Any

from sqlalchemy.orm import Session

from stakemod.models import Appeal, ModerationRequest, ModeratorVote
from stakemod.schemas.moderation import LedgerEvent

# Tie-break for events recorded at the same block height on the same request.
_EVENT_RANK = {
    "request_submitted": 0,
    "vote_cast": 1,
    "decision_finalized": 2,
    "appeal_filed": 3,
    "appeal_vote_cast": 4,
}


def collect_ledger_events(db: Session, request_id: int | None = None) -> list[LedgerEvent]:
    """Gather every event for one request, or for all requests, newest first."""
    events: list[dict[str, Any]] = []

    query = db.query(ModerationRequest)
    if request_id is not None:
        query = query.filter(ModerationRequest.id == request_id)
    for request in query.all():
        events.append(
            {
                "type": "request_submitted",
                "request_id": request.id,
                "block_height": int(request.created_at),
                "actor": request.platform_id,
            }
        )
        if request.finalized_at is not None:
            events.append(
                {
                    "type": "decision_finalized",
                    "request_id": request.id,
                    "block_height": int(request.finalized_at),
                    "classification": request.final_classification,
                }
            )

    vote_query = db.query(ModeratorVote)
    if request_id is not None:
        vote_query = vote_query.filter(ModeratorVote.request_id == request_id)
    for vote in vote_query.all():
        events.append(
            {
                "type": "appeal_vote_cast" if vote.is_appeal else "vote_cast",
                "request_id": vote.request_id,
                "block_height": int(vote.voted_at),
                "actor": vote.moderator,
                "classification": vote.classification,
                "is_appeal": vote.is_appeal,
            }
        )

    appeal_query = db.query(Appeal)
    if request_id is not None:
        appeal_query = appeal_query.filter(Appeal.request_id == request_id)
    for appeal in appeal_query.all():
        events.append(
            {
                "type": "appeal_filed",
                "request_id": appeal.request_id,
                "block_height": int(appeal.appealed_at),
                "actor": appeal.appellant,
                "classification": appeal.original_classification,
            }
        )

    events.sort(
        key=lambda e: (e["block_height"], e["request_id"], _EVENT_RANK[e["type"]]),
        reverse=True,
    )
    return [LedgerEvent(**event) for event in events]


def get_ledger_page(
    db: Session,
    request_id: int | None = None,
    limit: int = 50,
    before: int | None = None,
) -> list[LedgerEvent]:
    """Return up to ``limit`` events strictly below block height ``before``."""
    events = collect_ledger_events(db, request_id=request_id)
    if before is not None:
        events = [e for e in events if e.block_height < before]
    return events[:limit]
