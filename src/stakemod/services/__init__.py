"""Service layer for the Stakemod engine."""

from .context import CallContext
from .errors import (
    AlreadyAppealedError,
    AlreadyVotedError,
    AppealPeriodExpiredError,
    ErrorCode,
    InsufficientStakeError,
    InvalidClassificationError,
    InvalidStatusError,
    ModerationError,
    NotFoundError,
    OwnerOnlyError,
    UnauthorizedError,
)
from .moderation import ModerationService

__all__ = [
    "CallContext",
    "ModerationService",
    "ErrorCode",
    "ModerationError",
    "AlreadyAppealedError",
    "AlreadyVotedError",
    "AppealPeriodExpiredError",
    "InsufficientStakeError",
    "InvalidClassificationError",
    "InvalidStatusError",
    "NotFoundError",
    "OwnerOnlyError",
    "UnauthorizedError",
]
