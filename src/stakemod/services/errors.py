"""Errors raised by moderation operations.

Every failure is a precondition violation reported to the caller. The
operation that raised it has already been rolled back, so no partial state
is left behind.
"""

from __future__ import annotations

from enum import IntEnum
from typing import Any


class ErrorCode(IntEnum):
    """Stable identifiers for moderation errors."""

    OWNER_ONLY = 100
    NOT_FOUND = 101
    UNAUTHORIZED = 102
    INVALID_STATUS = 103
    INSUFFICIENT_STAKE = 104
    ALREADY_VOTED = 105
    APPEAL_PERIOD_EXPIRED = 106
    INVALID_CLASSIFICATION = 107
    ALREADY_APPEALED = 108


class ModerationError(RuntimeError):
    """Base exception raised for moderation precondition failures.

    Subclasses pin ``code`` to one of the ``ErrorCode`` values.
    """

    code: ErrorCode

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.code.name.replace("_", " ").lower()
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "error": self.code.name,
            "code": int(self.code),
            "message": self.message,
        }


class OwnerOnlyError(ModerationError):
    """Raised when a non-owner calls an owner-only operation."""

    code = ErrorCode.OWNER_ONLY


class NotFoundError(ModerationError):
    """Raised when a referenced platform, request or appeal does not exist."""

    code = ErrorCode.NOT_FOUND


class UnauthorizedError(ModerationError):
    """Raised when the caller is not a registered, active platform."""

    code = ErrorCode.UNAUTHORIZED


class InvalidStatusError(ModerationError):
    """Raised when the request is not in a status that allows the operation."""

    code = ErrorCode.INVALID_STATUS


class InsufficientStakeError(ModerationError):
    """Raised when a stake is below the configured minimum."""

    code = ErrorCode.INSUFFICIENT_STAKE


class AlreadyVotedError(ModerationError):
    """Raised when the moderator already used the request's vote slot."""

    code = ErrorCode.ALREADY_VOTED


class AppealPeriodExpiredError(ModerationError):
    """Raised when an appeal arrives after the appeal deadline."""

    code = ErrorCode.APPEAL_PERIOD_EXPIRED


class InvalidClassificationError(ModerationError):
    """Raised for out-of-range classifications and regional weights."""

    code = ErrorCode.INVALID_CLASSIFICATION


class AlreadyAppealedError(ModerationError):
    """Raised when the request already carries an appeal."""

    code = ErrorCode.ALREADY_APPEALED
