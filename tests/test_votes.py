"""Tests for content voting and weighted stake tallies."""

import pytest

from stakemod.models import Classification, RequestStatus
from stakemod.services import (
    AlreadyVotedError,
    InsufficientStakeError,
    InvalidClassificationError,
    InvalidStatusError,
    NotFoundError,
)

from tests.conftest import MODERATOR


def test_vote_uses_default_weight(service, ctx, pending_request) -> None:
    """Without declared expertise the stake is multiplied by 50."""
    service.vote_on_content(ctx(MODERATOR, 12), pending_request, Classification.SPAM, 1000, "us")

    request = service.get_moderation_request(pending_request)
    assert request.total_stake_for == 50_000
    assert request.total_stake_against == 0
    assert request.status == RequestStatus.UNDER_REVIEW

    vote = service.get_moderator_vote(pending_request, MODERATOR)
    assert vote.classification == Classification.SPAM
    assert vote.stake_amount == 50_000
    assert vote.voted_at == 12
    assert vote.is_appeal is False


def test_none_vote_counts_against(service, ctx, pending_request) -> None:
    """A NONE classification adds weighted stake to the against side."""
    service.vote_on_content(ctx(MODERATOR), pending_request, Classification.NONE, 2000, "us")

    request = service.get_moderation_request(pending_request)
    assert request.total_stake_for == 0
    assert request.total_stake_against == 100_000


def test_every_violation_category_counts_for(service, ctx, pending_request) -> None:
    """All non-NONE categories fold into the same 'for' total."""
    categories = [
        Classification.SPAM,
        Classification.HARASSMENT,
        Classification.HATE_SPEECH,
        Classification.MISINFORMATION,
        Classification.EXPLICIT,
    ]
    for index, category in enumerate(categories):
        service.vote_on_content(ctx(f"mod-{index}"), pending_request, category, 1000, "us")

    request = service.get_moderation_request(pending_request)
    assert request.total_stake_for == 5 * 50_000
    assert request.total_stake_against == 0


def test_declared_expertise_changes_weight(service, ctx, pending_request) -> None:
    """The declared weight for the vote's region replaces the default."""
    service.set_regional_expertise(ctx(MODERATOR), "eu", 80)

    service.vote_on_content(ctx(MODERATOR), pending_request, Classification.SPAM, 1000, "eu")

    assert service.get_moderation_request(pending_request).total_stake_for == 80_000
    assert service.get_moderator_vote(pending_request, MODERATOR).stake_amount == 80_000


def test_expertise_in_other_region_is_ignored(service, ctx, pending_request) -> None:
    """Weights only apply to the region they were declared for."""
    service.set_regional_expertise(ctx(MODERATOR), "eu", 80)

    service.vote_on_content(ctx(MODERATOR), pending_request, Classification.SPAM, 1000, "us")

    assert service.get_moderation_request(pending_request).total_stake_for == 50_000


def test_minimum_stake_boundary(service, ctx, pending_request) -> None:
    """999 is rejected, exactly 1000 is accepted."""
    with pytest.raises(InsufficientStakeError):
        service.vote_on_content(ctx("mod-low"), pending_request, Classification.SPAM, 999, "us")
    assert service.get_moderator_vote(pending_request, "mod-low") is None

    service.vote_on_content(ctx("mod-ok"), pending_request, Classification.SPAM, 1000, "us")
    assert service.get_moderator_vote(pending_request, "mod-ok") is not None


def test_second_vote_from_same_moderator_rejected(service, ctx, reviewed_request) -> None:
    """The vote slot accepts one vote per moderator."""
    before = service.get_moderation_request(reviewed_request)

    with pytest.raises(AlreadyVotedError):
        service.vote_on_content(ctx(MODERATOR), reviewed_request, Classification.NONE, 5000, "us")

    after = service.get_moderation_request(reviewed_request)
    assert after.total_stake_for == before.total_stake_for
    assert after.total_stake_against == before.total_stake_against
    assert service.get_moderator_reputation(MODERATOR).total_decisions == 1


def test_already_voted_checked_before_stake(service, ctx, reviewed_request) -> None:
    """A duplicate vote reports AlreadyVoted even with too little stake."""
    with pytest.raises(AlreadyVotedError):
        service.vote_on_content(ctx(MODERATOR), reviewed_request, Classification.SPAM, 1, "us")


def test_vote_on_missing_request(service, ctx) -> None:
    """Voting on an unknown request reports NotFound."""
    with pytest.raises(NotFoundError):
        service.vote_on_content(ctx(MODERATOR), 99, Classification.SPAM, 1000, "us")


def test_vote_after_finalize_rejected(service, ctx, approved_request) -> None:
    """Content voting closes once the decision is finalized."""
    with pytest.raises(InvalidStatusError):
        service.vote_on_content(ctx("late-mod"), approved_request, Classification.SPAM, 1000, "us")
    assert service.get_moderator_vote(approved_request, "late-mod") is None


@pytest.mark.parametrize("classification", [-1, 6, 42])
def test_out_of_range_classification_rejected(service, ctx, pending_request, classification) -> None:
    """Classifications outside 0..5 are rejected without side effects."""
    with pytest.raises(InvalidClassificationError):
        service.vote_on_content(ctx(MODERATOR), pending_request, classification, 1000, "us")

    request = service.get_moderation_request(pending_request)
    assert request.status == RequestStatus.PENDING
    assert service.get_moderator_reputation(MODERATOR) is None


def test_request_votes_listing(service, ctx, pending_request) -> None:
    """All votes on a request can be listed in casting order."""
    service.vote_on_content(ctx("mod-a", 3), pending_request, Classification.SPAM, 1000, "us")
    service.vote_on_content(ctx("mod-b", 4), pending_request, Classification.NONE, 1500, "us")

    votes = service.get_request_votes(pending_request)

    assert [v.moderator for v in votes] == ["mod-a", "mod-b"]
    assert [v.stake_amount for v in votes] == [50_000, 75_000]
    assert service.get_request_votes(pending_request, is_appeal=True) == []
