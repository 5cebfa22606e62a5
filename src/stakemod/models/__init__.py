"""SQLAlchemy models for the Stakemod engine."""

from .appeal import Appeal
from .expertise import MAX_REGIONAL_WEIGHT, MIN_REGIONAL_WEIGHT, RegionalExpertise
from .platform import Platform
from .reputation import ModeratorReputation
from .request import (
    CONTENT_DIGEST_SIZE,
    VOTING_STATUSES,
    Classification,
    ModerationRequest,
    RequestStatus,
)
from .system_clock import LedgerCounter, SystemClock
from .vote import ModeratorVote

__all__ = [
    "Appeal",
    "MAX_REGIONAL_WEIGHT", "MIN_REGIONAL_WEIGHT", "RegionalExpertise",
    "Platform",
    "ModeratorReputation",
    "CONTENT_DIGEST_SIZE", "VOTING_STATUSES",
    "Classification", "ModerationRequest", "RequestStatus",
    "LedgerCounter", "SystemClock",
    "ModeratorVote",
]
