"""Unit tests for connector errors and their mapping from upstream failures."""

from __future__ import annotations

import httpx
import msgspec
import pytest

from gitpulse.github.errors import ConnectorError, ErrorCode, GitHubConfigError
from gitpulse.github.mapping import map_exception, map_status_code

_REQUEST = httpx.Request("GET", "https://api.github.test/users/octocat/repos")


class TestErrorCode:
    """Default HTTP statuses re-exposed for each variant."""

    @pytest.mark.parametrize(
        ("code", "status"),
        [
            (ErrorCode.RATE_LIMIT_EXCEEDED, 429),
            (ErrorCode.AUTHENTICATION_FAILED, 401),
            (ErrorCode.USER_NOT_FOUND, 404),
            (ErrorCode.REPOSITORY_ACCESS_DENIED, 403),
            (ErrorCode.NETWORK_ERROR, 503),
            (ErrorCode.INVALID_REQUEST, 400),
            (ErrorCode.INTERNAL_ERROR, 500),
        ],
    )
    def test_default_status(self, code: ErrorCode, status: int) -> None:
        """Each code carries its documented default status."""
        assert code.default_status == status, f"wrong status for {code}"
        assert ConnectorError(code, "x").status == status, (
            "ConnectorError should adopt the default status"
        )


class TestMapStatusCode:
    """Every documented upstream status maps to exactly one variant."""

    def test_401_is_authentication_failed(self) -> None:
        """401 means the token was rejected."""
        error = map_status_code(401)
        assert error.code is ErrorCode.AUTHENTICATION_FAILED
        assert error.status == 401
        assert error.message == (
            "GitHub authentication failed. Please check your access token."
        )

    def test_403_is_repository_access_denied(self) -> None:
        """403 means the resource is forbidden."""
        error = map_status_code(403)
        assert error.code is ErrorCode.REPOSITORY_ACCESS_DENIED
        assert error.status == 403
        assert error.message == (
            "Access denied. You may have hit rate limits or lack permissions."
        )

    def test_404_is_user_not_found(self) -> None:
        """404 means the user does not exist."""
        error = map_status_code(404)
        assert error.code is ErrorCode.USER_NOT_FOUND
        assert error.status == 404
        assert error.message == "User not found on GitHub."

    def test_429_is_rate_limit_exceeded(self) -> None:
        """429 means the quota is exhausted."""
        error = map_status_code(429)
        assert error.code is ErrorCode.RATE_LIMIT_EXCEEDED
        assert error.status == 429
        assert error.message == (
            "GitHub API rate limit exceeded. Please try again later."
        )

    @pytest.mark.parametrize("status", [409, 422, 500, 502])
    def test_other_statuses_are_network_errors(self, status: int) -> None:
        """Unmapped statuses become NETWORK_ERROR but remember the status."""
        error = map_status_code(status, "upstream said no")
        assert error.code is ErrorCode.NETWORK_ERROR
        assert error.status == 503, "NETWORK_ERROR is re-exposed as 503"
        assert error.upstream_status == status
        assert error.message == (
            f"GitHub API request failed with HTTP {status}: upstream said no"
        )

    def test_mapped_status_is_kept_as_upstream_status(self) -> None:
        """Dedicated variants still record the upstream status."""
        assert map_status_code(404).upstream_status == 404


class TestMapException:
    """map_exception is total over exception types."""

    def test_connector_error_passes_through(self) -> None:
        """An existing ConnectorError is returned unchanged."""
        error = ConnectorError.rate_limited()
        assert map_exception(error) is error

    def test_http_status_error_maps_by_status(self) -> None:
        """httpx status errors are mapped by their response status."""
        response = httpx.Response(401, request=_REQUEST)
        exc = httpx.HTTPStatusError("denied", request=_REQUEST, response=response)
        assert map_exception(exc).code is ErrorCode.AUTHENTICATION_FAILED

    def test_transport_error_is_network_error(self) -> None:
        """Connection failures become NETWORK_ERROR with the cause in the text."""
        error = map_exception(httpx.ConnectError("connection refused"))
        assert error.code is ErrorCode.NETWORK_ERROR
        assert error.message == "Network error occurred: connection refused"
        assert error.is_transient, "transport failures are retryable"

    def test_httpx_timeout_is_network_error(self) -> None:
        """Read timeouts become NETWORK_ERROR."""
        error = map_exception(httpx.ReadTimeout("slow", request=_REQUEST))
        assert error.code is ErrorCode.NETWORK_ERROR
        assert "timed out" in error.message

    def test_decode_error_is_network_error(self) -> None:
        """Undecodable upstream bodies are treated as upstream trouble."""
        error = map_exception(msgspec.DecodeError("truncated"))
        assert error.code is ErrorCode.NETWORK_ERROR

    def test_asyncio_timeout_is_network_error(self) -> None:
        """Deadline expiry becomes NETWORK_ERROR."""
        assert map_exception(TimeoutError()).code is ErrorCode.NETWORK_ERROR

    def test_anything_else_is_internal_error(self) -> None:
        """Programming errors surface as INTERNAL_ERROR without their message."""
        error = map_exception(KeyError("secret"))
        assert error.code is ErrorCode.INTERNAL_ERROR
        assert error.status == 500
        assert "secret" not in error.message, "internal details must not leak"


class TestIsTransient:
    """Retry classification."""

    @pytest.mark.parametrize(
        ("error", "expected"),
        [
            (ConnectorError.network_error("reset"), True),
            (ConnectorError.http_error(502), True),
            (ConnectorError.http_error(409), False),
            (ConnectorError.user_not_found(upstream_status=404), False),
            (ConnectorError.rate_limited(upstream_status=429), False),
            (ConnectorError.internal("bug"), False),
        ],
    )
    def test_is_transient(self, error: ConnectorError, *, expected: bool) -> None:
        """Only transport failures and 5xx responses are transient."""
        assert error.is_transient is expected, f"wrong classification: {error}"


def test_timeout_message_names_the_deadline() -> None:
    """Timeout errors report the deadline that expired."""
    error = ConnectorError.timeout(600.0)
    assert error.code is ErrorCode.NETWORK_ERROR
    assert error.message == "GitHub request timed out after 600s"


def test_config_error_messages() -> None:
    """Configuration errors describe the offending setting."""
    assert "GITPULSE_GITHUB_TOKEN" in str(GitHubConfigError.missing_token())
    assert str(GitHubConfigError.not_positive("GITPULSE_MAX_RETRIES", "0")) == (
        "GITPULSE_MAX_RETRIES must be a positive integer, got: '0'"
    )
