"""Typed errors raised by the GitHub activity connector."""

from __future__ import annotations

import enum
from http import HTTPStatus


class ErrorCode(enum.StrEnum):
    """Failure variants exposed to callers of the connector."""

    RATE_LIMIT_EXCEEDED = "RATE_LIMIT_EXCEEDED"
    AUTHENTICATION_FAILED = "AUTHENTICATION_FAILED"
    USER_NOT_FOUND = "USER_NOT_FOUND"
    REPOSITORY_ACCESS_DENIED = "REPOSITORY_ACCESS_DENIED"
    NETWORK_ERROR = "NETWORK_ERROR"
    INVALID_REQUEST = "INVALID_REQUEST"
    INTERNAL_ERROR = "INTERNAL_ERROR"

    @property
    def default_status(self) -> int:
        """Return the HTTP status re-exposed to callers for this variant."""
        return _DEFAULT_STATUS[self]


_DEFAULT_STATUS: dict[ErrorCode, int] = {
    ErrorCode.RATE_LIMIT_EXCEEDED: HTTPStatus.TOO_MANY_REQUESTS,
    ErrorCode.AUTHENTICATION_FAILED: HTTPStatus.UNAUTHORIZED,
    ErrorCode.USER_NOT_FOUND: HTTPStatus.NOT_FOUND,
    ErrorCode.REPOSITORY_ACCESS_DENIED: HTTPStatus.FORBIDDEN,
    ErrorCode.NETWORK_ERROR: HTTPStatus.SERVICE_UNAVAILABLE,
    ErrorCode.INVALID_REQUEST: HTTPStatus.BAD_REQUEST,
    ErrorCode.INTERNAL_ERROR: HTTPStatus.INTERNAL_SERVER_ERROR,
}


class ConnectorError(Exception):
    """Raised for every failure that leaves the connector.

    Attributes
    ----------
    code
        Failure variant.
    status
        HTTP status re-exposed to callers; the default for ``code``.
    upstream_status
        Status GitHub answered with, when the failure was an HTTP response.

    """

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        *,
        upstream_status: int | None = None,
    ) -> None:
        """Initialise with a failure variant and human-readable message."""
        self.code = code
        self.status = code.default_status
        self.upstream_status = upstream_status
        self.message = message
        super().__init__(message)

    @property
    def is_transient(self) -> bool:
        """Return whether repeating the same request may succeed."""
        if self.code is not ErrorCode.NETWORK_ERROR:
            return False
        return (
            self.upstream_status is None
            or self.upstream_status >= HTTPStatus.INTERNAL_SERVER_ERROR
        )

    @classmethod
    def authentication_failed(
        cls, *, upstream_status: int | None = None
    ) -> ConnectorError:
        """Return an error for rejected credentials."""
        return cls(
            ErrorCode.AUTHENTICATION_FAILED,
            "GitHub authentication failed. Please check your access token.",
            upstream_status=upstream_status,
        )

    @classmethod
    def access_denied(cls, *, upstream_status: int | None = None) -> ConnectorError:
        """Return an error for forbidden resources."""
        return cls(
            ErrorCode.REPOSITORY_ACCESS_DENIED,
            "Access denied. You may have hit rate limits or lack permissions.",
            upstream_status=upstream_status,
        )

    @classmethod
    def user_not_found(cls, *, upstream_status: int | None = None) -> ConnectorError:
        """Return an error for unknown users or repositories."""
        return cls(
            ErrorCode.USER_NOT_FOUND,
            "User not found on GitHub.",
            upstream_status=upstream_status,
        )

    @classmethod
    def rate_limited(cls, *, upstream_status: int | None = None) -> ConnectorError:
        """Return an error for exhausted API quota."""
        return cls(
            ErrorCode.RATE_LIMIT_EXCEEDED,
            "GitHub API rate limit exceeded. Please try again later.",
            upstream_status=upstream_status,
        )

    @classmethod
    def http_error(cls, status_code: int, detail: str = "") -> ConnectorError:
        """Return an error for any other non-2xx GitHub response."""
        msg = f"GitHub API request failed with HTTP {status_code}"
        if detail:
            msg = f"{msg}: {detail}"
        return cls(ErrorCode.NETWORK_ERROR, msg, upstream_status=status_code)

    @classmethod
    def network_error(cls, detail: str) -> ConnectorError:
        """Return an error for transport failures (DNS, TLS, resets, bad bodies)."""
        return cls(ErrorCode.NETWORK_ERROR, f"Network error occurred: {detail}")

    @classmethod
    def timeout(cls, seconds: float) -> ConnectorError:
        """Return an error for work that exceeded its deadline."""
        return cls(
            ErrorCode.NETWORK_ERROR,
            f"GitHub request timed out after {seconds:g}s",
        )

    @classmethod
    def invalid_request(cls, detail: str) -> ConnectorError:
        """Return an error for requests the connector cannot issue."""
        return cls(ErrorCode.INVALID_REQUEST, detail)

    @classmethod
    def internal(cls, detail: str) -> ConnectorError:
        """Return an error for failures that are not GitHub's doing."""
        return cls(ErrorCode.INTERNAL_ERROR, f"Internal error: {detail}")


class GitHubConfigError(RuntimeError):
    """Raised when connector configuration is missing or invalid."""

    @classmethod
    def missing_token(cls) -> GitHubConfigError:
        """Return an error when no GitHub token is configured."""
        return cls("GITPULSE_GITHUB_TOKEN is required for GitHub API")

    @classmethod
    def empty_token(cls) -> GitHubConfigError:
        """Return an error when the provided token is blank."""
        return cls("GitHub token must be non-empty")

    @classmethod
    def blank(cls, name: str) -> GitHubConfigError:
        """Return an error for a blank string setting."""
        return cls(f"{name} must be non-blank")

    @classmethod
    def not_positive(cls, name: str, raw: object) -> GitHubConfigError:
        """Return an error for a setting that must be a positive integer."""
        return cls(f"{name} must be a positive integer, got: {raw!r}")
