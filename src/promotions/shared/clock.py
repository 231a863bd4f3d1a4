"""Timestamp helpers.

Validity windows are compared in UTC. Naive timestamps (as returned by some
providers, or sent by clients without an offset) are read as UTC.
"""

from datetime import UTC, datetime


def utc_now() -> datetime:
    return datetime.now(UTC)


def as_utc(value: datetime | None) -> datetime | None:
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)
