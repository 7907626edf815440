"""Tests for store timestamp conversion."""

from datetime import datetime, timezone, timedelta

from app.store.timestamps import from_store_timestamp, to_store_timestamp


class TestToStoreTimestamp:
    def test_round_trip_keeps_millisecond_precision(self):
        value = datetime(2026, 3, 14, 9, 26, 53, 589000)
        assert from_store_timestamp(to_store_timestamp(value)) == value

    def test_returns_integer_milliseconds(self):
        value = datetime(2026, 1, 1, tzinfo=timezone.utc)
        assert to_store_timestamp(value) == int(value.timestamp()) * 1000


class TestFromStoreTimestamp:
    def test_none_and_garbage_yield_none(self):
        assert from_store_timestamp(None) is None
        assert from_store_timestamp("not a date") is None
        assert from_store_timestamp({"seconds": 1}) is None
        assert from_store_timestamp(True) is None

    def test_naive_datetime_passes_through(self):
        value = datetime(2026, 5, 1, 12, 0)
        assert from_store_timestamp(value) is value

    def test_aware_datetime_becomes_naive_local(self):
        value = datetime(2026, 5, 1, 12, 0, tzinfo=timezone(timedelta(hours=7)))
        result = from_store_timestamp(value)
        assert result is not None
        assert result.tzinfo is None
        assert result == value.astimezone().replace(tzinfo=None)

    def test_iso_string_is_parsed(self):
        assert from_store_timestamp("2026-05-01T08:30:00") == datetime(2026, 5, 1, 8, 30)

    def test_float_milliseconds(self):
        expected = datetime(2026, 2, 2, 2, 2, 2)
        assert from_store_timestamp(float(to_store_timestamp(expected))) == expected
