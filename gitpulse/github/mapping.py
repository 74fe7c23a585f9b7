"""Translate upstream failures into :class:`ConnectorError` variants.

The mapping is total: every exception handed to :func:`map_exception` comes
back as exactly one ``ConnectorError``.
"""

from __future__ import annotations

import typing as typ
from http import HTTPStatus

import httpx
import msgspec

from .errors import ConnectorError

if typ.TYPE_CHECKING:
    import collections.abc as cabc

_STATUS_FACTORIES: dict[int, cabc.Callable[..., ConnectorError]] = {
    HTTPStatus.UNAUTHORIZED: ConnectorError.authentication_failed,
    HTTPStatus.FORBIDDEN: ConnectorError.access_denied,
    HTTPStatus.NOT_FOUND: ConnectorError.user_not_found,
    HTTPStatus.TOO_MANY_REQUESTS: ConnectorError.rate_limited,
}


def map_status_code(status_code: int, detail: str = "") -> ConnectorError:
    """Return the connector error for a non-2xx upstream status.

    Parameters
    ----------
    status_code
        HTTP status returned by GitHub.
    detail
        Optional upstream detail appended to otherwise generic messages.

    Returns
    -------
    ConnectorError
        401, 403, 404 and 429 map to their dedicated variants; anything else
        is a ``NETWORK_ERROR`` that remembers the upstream status.

    """
    factory = _STATUS_FACTORIES.get(status_code)
    if factory is not None:
        return factory(upstream_status=status_code)
    return ConnectorError.http_error(status_code, detail)


def map_exception(exc: BaseException) -> ConnectorError:
    """Return the connector error describing ``exc``.

    Connector errors pass through unchanged. HTTP and transport failures from
    httpx, undecodable bodies and timeouts are treated as upstream trouble;
    anything else is an ``INTERNAL_ERROR``.
    """
    match exc:
        case ConnectorError():
            return exc
        case httpx.HTTPStatusError():
            return map_status_code(exc.response.status_code)
        case httpx.TimeoutException():
            return ConnectorError.network_error(f"request timed out ({exc})")
        case httpx.RequestError():
            return ConnectorError.network_error(str(exc) or type(exc).__name__)
        case msgspec.DecodeError():
            return ConnectorError.network_error(f"unexpected response body ({exc})")
        case TimeoutError():
            return ConnectorError.network_error("operation timed out")
        case _:
            return ConnectorError.internal(type(exc).__name__)
