"""Turn inbound activity parameters into a validated ``FetchRequest``.

Both the JSON body of ``POST`` and the query string of ``GET`` funnel through
:func:`build_fetch_request`, so the two routes reject the same inputs with the
same ``field: reason`` details.
"""

from __future__ import annotations

from gitpulse.api.errors import FieldError, RequestValidationError
from gitpulse.github.models import FetchRequest

__all__ = ["DEFAULT_COMMIT_LIMIT", "build_fetch_request", "parse_query_int"]

DEFAULT_COMMIT_LIMIT = 20

_USERNAME_REQUIRED = "Username is required"


def parse_query_int(raw: str | None) -> object:
    """Convert a query-string value to ``int`` where possible.

    Values that are not integers are returned unchanged so that
    :func:`build_fetch_request` reports them against the right field.
    """
    if raw is None:
        return None
    try:
        return int(raw.strip())
    except ValueError:
        return raw


def _positive_int(
    value: object,
    *,
    field: str,
    label: str,
    default: int,
    errors: list[FieldError],
) -> int:
    if value is None:
        return default
    # bool is an int subclass; JSON true must not pass as 1
    if isinstance(value, bool) or not isinstance(value, int):
        errors.append(FieldError(field, f"{label} must be an integer"))
        return default
    if value < 1:
        errors.append(FieldError(field, f"{label} must be positive"))
        return default
    return value


def build_fetch_request(
    username: object,
    page_size: object = None,
    commit_limit: object = None,
    *,
    default_page_size: int,
) -> FetchRequest:
    """Validate raw request parameters.

    Parameters
    ----------
    username
        GitHub login; must be a non-blank string.
    page_size
        Repositories per listing page, or ``None`` for ``default_page_size``.
    commit_limit
        Commits kept per repository, or ``None`` for
        :data:`DEFAULT_COMMIT_LIMIT`.
    default_page_size
        Page size applied when the caller omits one.

    Returns
    -------
    FetchRequest
        The validated request, with surrounding whitespace stripped from the
        username.

    Raises
    ------
    RequestValidationError
        Listing every rejected field.

    """
    errors: list[FieldError] = []

    login = username.strip() if isinstance(username, str) else ""
    if not login:
        errors.append(FieldError("username", _USERNAME_REQUIRED))

    size = _positive_int(
        page_size,
        field="pageSize",
        label="Page size",
        default=default_page_size,
        errors=errors,
    )
    limit = _positive_int(
        commit_limit,
        field="commitLimit",
        label="Commit limit",
        default=DEFAULT_COMMIT_LIMIT,
        errors=errors,
    )

    if errors:
        raise RequestValidationError(errors)
    return FetchRequest(username=login, page_size=size, commit_limit=limit)

