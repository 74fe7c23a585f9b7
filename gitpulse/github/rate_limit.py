"""GitHub rate-limit metadata carried on REST responses."""

from __future__ import annotations

import datetime as dt
import typing as typ

from gitpulse.common.time import from_epoch_seconds, utcnow

from .models import RateLimitSnapshot

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    import httpx

_REMAINING_HEADER = "X-RateLimit-Remaining"
_LIMIT_HEADER = "X-RateLimit-Limit"
_RESET_HEADER = "X-RateLimit-Reset"

_PLACEHOLDER_QUOTA = 5000
_PLACEHOLDER_RESET = dt.timedelta(hours=1)


def _header_int(headers: httpx.Headers, name: str) -> int | None:
    raw = headers.get(name)
    if raw is None or not raw.strip().isdigit():
        return None
    return int(raw)


def parse_rate_limit_headers(headers: httpx.Headers) -> RateLimitSnapshot | None:
    """Return the quota advertised by ``X-RateLimit-*`` headers.

    Returns ``None`` unless all three headers are present and numeric.
    """
    remaining = _header_int(headers, _REMAINING_HEADER)
    limit = _header_int(headers, _LIMIT_HEADER)
    reset = _header_int(headers, _RESET_HEADER)
    if remaining is None or limit is None or reset is None:
        return None
    return RateLimitSnapshot(
        remaining=remaining,
        limit=limit,
        reset_at=from_epoch_seconds(reset),
    )


def placeholder_rate_limit(now: dt.datetime | None = None) -> RateLimitSnapshot:
    """Return the nominal authenticated quota, used when GitHub sent none."""
    current = now or utcnow()
    return RateLimitSnapshot(
        remaining=_PLACEHOLDER_QUOTA,
        limit=_PLACEHOLDER_QUOTA,
        reset_at=current + _PLACEHOLDER_RESET,
    )


def select_rate_limit(
    snapshots: cabc.Iterable[RateLimitSnapshot | None],
    *,
    now: dt.datetime | None = None,
) -> RateLimitSnapshot:
    """Pick the most recent quota among concurrent observations.

    Responses finish out of order, so the observation with the fewest
    remaining requests is the latest one. Falls back to
    :func:`placeholder_rate_limit` when nothing was observed.
    """
    observed = [snapshot for snapshot in snapshots if snapshot is not None]
    if not observed:
        return placeholder_rate_limit(now)
    return min(observed, key=lambda snapshot: (snapshot.remaining, -snapshot.limit))
