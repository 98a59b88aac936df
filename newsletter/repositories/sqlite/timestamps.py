"""Conversion of timestamps to and from their SQLite text form.

Timestamps are stored as UTC text with a fixed width so that SQL comparisons
on the column follow chronological order.
"""

from __future__ import annotations

from datetime import datetime, timezone

DB_FORMAT = "%Y-%m-%d %H:%M:%S.%f"


def to_db(value: datetime) -> str:
    """Return ``value`` as stored text. Naive datetimes are taken as UTC."""
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value.strftime(DB_FORMAT)


def parse(value: str) -> datetime:
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def from_db(value: str | None) -> datetime | None:
    if value is None:
        return None
    return parse(value)
