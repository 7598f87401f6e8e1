"""Tests for the bucket definition log."""

import pytest
from datetime import date
from decimal import Decimal

from budgetledger.domain.errors import ConflictError, NotFoundError, ValidationError
from budgetledger.domain.ledger_bucket import BucketDefinitionLog, LedgerBucket


@pytest.fixture
def log(cheque):
    log = BucketDefinitionLog()
    log.track("POWER", cheque, date(2013, 1, 1))
    return log


def test_track_and_current(log, cheque):
    assert log.current("POWER") == LedgerBucket("POWER", cheque)
    assert log.current("HAIR") is None


def test_track_twice_conflicts(log, savings):
    with pytest.raises(ConflictError):
        log.track("POWER", savings, date(2013, 2, 1))


def test_move_keeps_history(log, cheque, savings):
    log.move("POWER", savings, date(2013, 8, 1))

    assert log.current("POWER").stored_in_account == savings
    assert log.as_of("POWER", date(2013, 7, 31)).stored_in_account == cheque
    assert log.as_of("POWER", date(2013, 8, 1)).stored_in_account == savings
    assert len(log.assignments()) == 2


def test_move_carries_opening_balance(cheque, savings):
    log = BucketDefinitionLog()
    log.track("CAR", cheque, date(2013, 7, 1), Decimal("300"))

    moved = log.move("CAR", savings, date(2013, 7, 10))

    assert moved.opening_balance == Decimal("300")
    assert log.current_assignment("CAR") == moved


def test_as_of_before_first_assignment_uses_first(log, cheque):
    assert log.as_of("POWER", date(2000, 1, 1)).stored_in_account == cheque
    assert log.as_of("HAIR", date(2000, 1, 1)) is None


def test_move_cannot_predate_latest_assignment(log, savings):
    with pytest.raises(ValidationError):
        log.move("POWER", savings, date(2012, 12, 31))


def test_move_untracked_bucket(log, savings):
    with pytest.raises(NotFoundError):
        log.move("HAIR", savings, date(2013, 8, 1))


def test_retire_and_track_again(log, savings):
    log.retire("POWER", date(2013, 9, 1))
    assert log.current("POWER") is None
    assert log.current_buckets() == []
    assert log.knows("POWER")
    assert log.is_retired("POWER")

    log.track("POWER", savings, date(2013, 10, 1), Decimal("20"))
    assert log.current("POWER").stored_in_account == savings
    assert log.current_assignment("POWER").opening_balance == Decimal("20")


def test_current_buckets_sorted_by_code(log, savings):
    log.track("HAIR", savings, date(2013, 1, 1))
    assert [b.bucket_code for b in log.current_buckets()] == ["HAIR", "POWER"]
