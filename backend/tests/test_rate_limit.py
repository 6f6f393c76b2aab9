from datetime import datetime, timedelta, timezone

from app.utils import rate_limit
from app.utils.rate_limit import check_rate_limit

START = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


def test_first_attempt_allowed_second_blocked():
    assert check_rate_limit("fp", 1, now=START) is True
    assert check_rate_limit("fp", 1, now=START + timedelta(minutes=5)) is False


def test_keys_are_per_fingerprint_and_worker():
    assert check_rate_limit("fp", 1, now=START) is True
    assert check_rate_limit("fp", 2, now=START) is True
    assert check_rate_limit("other", 1, now=START) is True


def test_window_resets_from_first_attempt():
    assert check_rate_limit("fp", 1, now=START) is True
    # A rejected attempt late in the window does not push the reset back
    assert check_rate_limit("fp", 1, now=START + timedelta(hours=23)) is False
    assert check_rate_limit("fp", 1, now=START + timedelta(hours=24)) is False
    assert check_rate_limit("fp", 1, now=START + timedelta(hours=24, seconds=1)) is True
    assert check_rate_limit("fp", 1, now=START + timedelta(hours=25)) is False


def test_expired_records_are_pruned_on_next_check():
    check_rate_limit("old", 1, now=START)
    check_rate_limit("new", 1, now=START + timedelta(hours=20))

    assert check_rate_limit("other", 1, now=START + timedelta(hours=30)) is True

    assert ("old", 1) not in rate_limit._review_attempts
    assert ("new", 1) in rate_limit._review_attempts
    assert len(rate_limit._review_attempts) == 2
