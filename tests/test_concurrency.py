"""Tests for writes racing a concurrent writer on the same key."""

import pytest
from sqlalchemy.exc import IntegrityError

from stakemod.models import Classification, RequestStatus
from stakemod.services import AlreadyAppealedError, AlreadyVotedError
from stakemod.services.moderation import conflicting_table

from tests.conftest import MODERATOR, PLATFORM


def test_first_vote_tolerates_concurrent_reputation_row(
    service, ctx, pending_request, concurrent_insert
) -> None:
    """A reputation row created by a vote elsewhere is reused, not reported as AlreadyVoted."""
    concurrent_insert(
        "moderator_reputation",
        "INSERT INTO moderator_reputation "
        "(moderator, total_decisions, correct_decisions, total_stake, regional_weight) "
        "VALUES (?, 4, 1, 4000, 50)",
        (MODERATOR,),
    )

    service.vote_on_content(ctx(MODERATOR, 12), pending_request, Classification.SPAM, 1000, "us")

    assert service.get_moderator_vote(pending_request, MODERATOR) is not None
    reputation = service.get_moderator_reputation(MODERATOR)
    assert reputation.total_decisions == 5
    assert reputation.total_stake == 5000
    assert reputation.correct_decisions == 1


def test_vote_slot_race_reports_already_voted(
    service, ctx, pending_request, concurrent_insert
) -> None:
    """Losing the vote slot to a concurrent vote maps to AlreadyVoted and rolls back."""
    concurrent_insert(
        "moderator_vote",
        "INSERT INTO moderator_vote "
        "(request_id, moderator, classification, stake_amount, voted_at, is_appeal) "
        "VALUES (?, ?, 0, 50000, 11, 0)",
        (pending_request, MODERATOR),
    )

    with pytest.raises(AlreadyVotedError):
        service.vote_on_content(ctx(MODERATOR, 12), pending_request, Classification.SPAM, 1000, "us")

    request = service.get_moderation_request(pending_request)
    assert request.status == RequestStatus.PENDING
    assert request.total_stake_for == 0
    assert service.get_moderator_reputation(MODERATOR) is None


def test_appeal_race_reports_already_appealed(
    service, ctx, approved_request, concurrent_insert
) -> None:
    """Losing the appeal key to a concurrent appeal maps to AlreadyAppealed."""
    concurrent_insert(
        "appeal",
        "INSERT INTO appeal "
        "(request_id, appellant, appeal_stake, appealed_at, original_classification, new_classification) "
        "VALUES (?, 'rival', 2000, 25, 2, 0)",
        (approved_request,),
    )

    with pytest.raises(AlreadyAppealedError):
        service.submit_appeal(ctx("appellant", 30), approved_request, 2000)

    assert service.get_moderation_request(approved_request).status == RequestStatus.APPROVED


def test_register_race_updates_existing_platform(service, ctx, concurrent_insert) -> None:
    """A platform row created concurrently is updated in place."""
    concurrent_insert(
        "platform",
        "INSERT INTO platform (identity, name, active, request_count) VALUES (?, 'Rival', 0, 7)",
        (PLATFORM,),
    )

    service.register_platform(ctx(PLATFORM), "Platform P")

    info = service.get_platform_info(PLATFORM)
    assert info.name == "Platform P"
    assert info.active is True
    assert info.request_count == 0
    # The writer that created the row is the one that counts it.
    assert service.get_platform_count() == 0


def test_expertise_race_keeps_latest_weight(service, ctx, concurrent_insert) -> None:
    """A concurrent declaration for the same region is overwritten, not an error."""
    concurrent_insert(
        "regional_expertise",
        "INSERT INTO regional_expertise (moderator, region, weight) VALUES (?, 'eu', 10)",
        (MODERATOR,),
    )

    service.set_regional_expertise(ctx(MODERATOR), "eu", 70)

    assert service.get_regional_expertise(MODERATOR, "eu") == 70


def test_conflicting_table_reads_insert_target() -> None:
    err = IntegrityError(
        'INSERT INTO "moderator_vote" (request_id, moderator) VALUES (?, ?)',
        (0, "m"),
        Exception("UNIQUE constraint failed"),
    )
    assert conflicting_table(err) == "moderator_vote"

    update = IntegrityError("UPDATE platform SET name=?", ("x",), Exception("boom"))
    assert conflicting_table(update) is None


def test_unrelated_integrity_error_is_not_mapped(service) -> None:
    """Only conflicts on the guarded table become domain errors."""
    err = IntegrityError(
        "INSERT INTO moderator_reputation (moderator) VALUES (?)",
        ("m",),
        Exception("UNIQUE constraint failed"),
    )

    with pytest.raises(IntegrityError):
        with service._transaction("vote_on_content", conflicts={"moderator_vote": AlreadyVotedError}):
            raise err
