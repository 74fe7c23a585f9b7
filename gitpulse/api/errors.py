"""Validation errors and Falcon error handlers for the API layer.

Every failure leaves the API as a JSON object of the form::

    {"error": "<CODE>", "message": "...", "timestamp": "...", "status": 503}

Validation failures add a ``details`` list of ``"field: reason"`` strings.
Unexpected exceptions are logged with their traceback and answered with a
generic message so no internals leak to callers.

Usage
-----
Register error handlers on the Falcon app::

    from gitpulse.api.errors import register_error_handlers

    register_error_handlers(app)

"""

from __future__ import annotations

import dataclasses as dc
import typing as typ
from http import HTTPStatus

from gitpulse.common.time import utcnow
from gitpulse.github.errors import ConnectorError
from gitpulse.logging import get_logger, log_error, log_exception, log_warning

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    import falcon.asgi
    from falcon.asgi import Request, Response

__all__ = [
    "FieldError",
    "RequestValidationError",
    "handle_connector_error",
    "handle_unexpected_error",
    "handle_validation_error",
    "register_error_handlers",
]

logger = get_logger(__name__)

_VALIDATION_ERROR = "VALIDATION_ERROR"
_INTERNAL_ERROR = "INTERNAL_ERROR"
_SERVER_ERROR_THRESHOLD = 500


@dc.dataclass(frozen=True, slots=True)
class FieldError:
    """A single rejected input field."""

    field: str
    reason: str

    def __str__(self) -> str:
        """Render as ``field: reason``."""
        return f"{self.field}: {self.reason}"


class RequestValidationError(Exception):
    """Raised for client input that should map to HTTP 400.

    Use this instead of ``ValueError`` so that only intentional validation
    failures are surfaced to the caller, while programmer mistakes still
    propagate as 500s.

    Attributes
    ----------
    errors
        Every rejected field, in the order they were checked.

    """

    def __init__(self, errors: cabc.Sequence[FieldError]) -> None:
        """Initialise with one or more field errors."""
        if not errors:
            msg = "RequestValidationError requires at least one field error"
            raise ValueError(msg)
        self.errors = tuple(errors)
        super().__init__("; ".join(self.details))

    @property
    def details(self) -> list[str]:
        """Return the errors rendered as ``field: reason`` strings."""
        return [str(error) for error in self.errors]


def _error_body(code: str, message: str, status: int) -> dict[str, typ.Any]:
    return {
        "error": code,
        "message": message,
        "timestamp": utcnow().isoformat(),
        "status": status,
    }


async def handle_connector_error(
    req: Request,
    resp: Response,
    ex: ConnectorError,
    _params: dict[str, typ.Any],
) -> None:
    """Map ``ConnectorError`` to its default status and a JSON error body."""
    if ex.status >= _SERVER_ERROR_THRESHOLD:
        log_error(
            logger, "GitHub connector error on %s: %s", req.path, ex, exc_info=ex
        )
    else:
        log_warning(logger, "GitHub connector error on %s: %s", req.path, ex)
    resp.status = ex.status
    resp.media = _error_body(ex.code.value, ex.message, ex.status)


async def handle_validation_error(
    req: Request,
    resp: Response,
    ex: RequestValidationError,
    _params: dict[str, typ.Any],
) -> None:
    """Map ``RequestValidationError`` to an HTTP 400 JSON response."""
    log_warning(logger, "Validation error on %s: %s", req.path, ex)
    resp.status = HTTPStatus.BAD_REQUEST
    media = _error_body(
        _VALIDATION_ERROR, "Invalid request parameters", HTTPStatus.BAD_REQUEST
    )
    media["details"] = ex.details
    resp.media = media


async def handle_unexpected_error(
    req: Request,
    resp: Response,
    ex: Exception,
    _params: dict[str, typ.Any],
) -> None:
    """Answer any unhandled exception with a generic HTTP 500 body."""
    log_exception(logger, f"Unexpected error on {req.path}", ex)
    resp.status = HTTPStatus.INTERNAL_SERVER_ERROR
    resp.media = _error_body(
        _INTERNAL_ERROR,
        "An unexpected error occurred",
        HTTPStatus.INTERNAL_SERVER_ERROR,
    )


def register_error_handlers(app: falcon.asgi.App) -> None:
    """Install the gitpulse error handlers on ``app``.

    Falcon picks the most specific handler, so its own ``HTTPError`` handling
    (unknown routes, unsupported methods) is unaffected by the catch-all.
    """
    app.add_error_handler(Exception, handle_unexpected_error)
    app.add_error_handler(ConnectorError, handle_connector_error)
    app.add_error_handler(RequestValidationError, handle_validation_error)
