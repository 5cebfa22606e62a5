"""Pydantic schemas for Stakemod read models."""

from .moderation import (
    AppealInfo,
    LedgerEvent,
    ModerationRequestInfo,
    ModeratorReputationInfo,
    ModeratorVoteInfo,
    PlatformInfo,
)

__all__ = [
    "AppealInfo",
    "LedgerEvent",
    "ModerationRequestInfo",
    "ModeratorReputationInfo",
    "ModeratorVoteInfo",
    "PlatformInfo",
]
