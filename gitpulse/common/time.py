"""Clock helpers."""

from __future__ import annotations

import datetime as dt


def utcnow() -> dt.datetime:
    """Return the current time as an aware UTC timestamp."""
    return dt.datetime.now(dt.UTC)


def from_epoch_seconds(value: int) -> dt.datetime:
    """Convert a POSIX timestamp such as ``X-RateLimit-Reset`` to aware UTC."""
    return dt.datetime.fromtimestamp(value, tz=dt.UTC)
