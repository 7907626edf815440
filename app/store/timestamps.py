"""Conversion between calendar datetimes and the store's timestamp format.

The store keeps timestamps as integer milliseconds since the Unix epoch.
Callers only ever see timezone-naive local datetimes.
"""

from datetime import datetime
from typing import Any


def to_store_timestamp(value: datetime) -> int:
    """
    Convert a datetime to epoch milliseconds.

    Naive datetimes are interpreted as local time; aware ones are converted from their own zone.
    """
    return int(round(value.timestamp() * 1000))


def from_store_timestamp(value: Any) -> datetime | None:
    """
    Convert a stored timestamp back to a naive local datetime.

    Documents are loosely typed, so besides epoch milliseconds this also accepts
    datetimes and ISO-8601 strings. Anything else (including None) yields None.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            return value.astimezone().replace(tzinfo=None)
        return value
    if isinstance(value, (int, float)):
        return datetime.fromtimestamp(value / 1000)
    if isinstance(value, str):
        try:
            parsed = datetime.fromisoformat(value)
        except ValueError:
            return None
        return from_store_timestamp(parsed)
    return None


def now_store_timestamp() -> int:
    return to_store_timestamp(datetime.now())
