"""
Timestamp normalisation tests.
"""

from datetime import datetime, timedelta, timezone

from app.core.timeutil import as_utc


def test_naive_timestamp_taken_as_utc():
    assert as_utc(datetime(2024, 5, 1, 12, 0)) == datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


def test_aware_timestamp_converted_to_utc():
    cet = timezone(timedelta(hours=2))
    converted = as_utc(datetime(2024, 5, 1, 14, 0, tzinfo=cet))
    assert converted.tzinfo == timezone.utc
    assert converted.hour == 12


def test_none_passes_through():
    assert as_utc(None) is None


def test_reset_expiry_from_naive_column_compares_with_aware_now():
    expired = datetime.now(timezone.utc).replace(tzinfo=None) - timedelta(minutes=1)
    assert datetime.now(timezone.utc) > as_utc(expired)
