"""Moderation-related Pydantic schemas returned by read operations."""

from pydantic import BaseModel, ConfigDict, Field

from stakemod.models.request import Classification, RequestStatus


class PlatformInfo(BaseModel):
    """Schema for a registered platform."""

    model_config = ConfigDict(from_attributes=True)

    identity: str
    name: str
    active: bool
    request_count: int


class ModerationRequestInfo(BaseModel):
    """Schema for moderation request state."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    platform_id: str
    content_digest: bytes
    submitter: str
    status: RequestStatus
    created_at: int = Field(..., description="Block height at submission")
    final_classification: Classification
    total_stake_for: int
    total_stake_against: int
    appeal_deadline: int


class ModeratorVoteInfo(BaseModel):
    """Schema for a single recorded vote."""

    model_config = ConfigDict(from_attributes=True)

    request_id: int
    moderator: str
    classification: Classification
    stake_amount: int = Field(..., description="Weighted stake for content votes, raw stake for appeal votes")
    voted_at: int
    is_appeal: bool


class ModeratorReputationInfo(BaseModel):
    """Schema for moderator reputation counters."""

    model_config = ConfigDict(from_attributes=True)

    moderator: str
    total_decisions: int
    correct_decisions: int
    total_stake: int
    regional_weight: int
    accuracy: int


class AppealInfo(BaseModel):
    """Schema for an appeal filed against a finalized decision."""

    model_config = ConfigDict(from_attributes=True)

    request_id: int
    appellant: str
    appeal_stake: int
    appealed_at: int
    original_classification: Classification
    new_classification: Classification


class LedgerEvent(BaseModel):
    """One entry of the moderation activity feed."""

    type: str
    request_id: int
    block_height: int
    actor: str | None = None
    classification: Classification | None = None
    is_appeal: bool | None = None
