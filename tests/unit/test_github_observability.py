"""Unit tests for activity event logging and error categorization."""

from __future__ import annotations

import datetime as dt

import pytest

from gitpulse.github.errors import ConnectorError, GitHubConfigError
from gitpulse.github.models import ActivityResult, RateLimitSnapshot
from gitpulse.github.observability import (
    ActivityEventLogger,
    ActivityEventType,
    ActivityRunContext,
    ErrorCategory,
    categorize_error,
)
from tests.helpers.recording_logger import RecordingLogger

_STARTED = dt.datetime(2024, 6, 1, 12, 0, tzinfo=dt.UTC)
_CONTEXT = ActivityRunContext(
    username="octocat", page_size=30, commit_limit=20, started_at=_STARTED
)


@pytest.mark.parametrize(
    ("error", "category"),
    [
        (TimeoutError(), ErrorCategory.TIMEOUT),
        (GitHubConfigError.missing_token(), ErrorCategory.CONFIGURATION),
        (ConnectorError.network_error("reset"), ErrorCategory.TRANSIENT),
        (ConnectorError.http_error(502), ErrorCategory.TRANSIENT),
        (ConnectorError.rate_limited(upstream_status=429), ErrorCategory.TRANSIENT),
        (
            ConnectorError.user_not_found(upstream_status=404),
            ErrorCategory.CLIENT_ERROR,
        ),
        (ConnectorError.invalid_request("bad"), ErrorCategory.CLIENT_ERROR),
        (ConnectorError.internal("bug"), ErrorCategory.UNKNOWN),
        (ValueError("bug"), ErrorCategory.UNKNOWN),
    ],
)
def test_categorize_error(error: BaseException, category: ErrorCategory) -> None:
    """Errors fall into the alert category matching their cause."""
    assert categorize_error(error) is category, f"wrong category for {error!r}"


class TestActivityEventLogger:
    """Event line formats."""

    def test_run_started(self) -> None:
        """The start event records the request parameters."""
        logger = RecordingLogger()

        ActivityEventLogger(logger).log_run_started(_CONTEXT)

        assert logger.messages("INFO") == [
            "[activity.run.started] username=octocat page_size=30 commit_limit=20 "
            "started_at=2024-06-01T12:00:00+00:00"
        ]

    def test_run_completed(self) -> None:
        """Completion records counts, duration and remaining quota."""
        logger = RecordingLogger()
        result = ActivityResult.assemble(
            username="octocat",
            fetched_at=_STARTED,
            repositories=[],
            rate_limit_info=RateLimitSnapshot(
                remaining=4990, limit=5000, reset_at=_STARTED
            ),
        )

        ActivityEventLogger(logger).log_run_completed(
            _CONTEXT, result, dt.timedelta(seconds=1.5)
        )

        assert logger.messages("INFO") == [
            "[activity.run.completed] username=octocat duration_seconds=1.500 "
            "total_repositories=0 total_commits=0 rate_limit_remaining=4990"
        ]

    def test_run_failed_attaches_exception(self) -> None:
        """Failures log at ERROR with the exception attached."""
        logger = RecordingLogger()
        error = ConnectorError.rate_limited(upstream_status=429)

        ActivityEventLogger(logger).log_run_failed(
            _CONTEXT, error, dt.timedelta(seconds=2)
        )

        (call,) = logger.calls
        assert call.level == "ERROR"
        assert call.exc_info is error
        assert call.message.startswith(f"[{ActivityEventType.RUN_FAILED}]")
        assert "error_type=ConnectorError" in call.message
        assert "error_category=transient" in call.message

    def test_commits_skipped_names_timeouts(self) -> None:
        """A bare TimeoutError still gets a readable message."""
        logger = RecordingLogger()

        ActivityEventLogger(logger).log_commits_skipped("octocat/slow", TimeoutError())

        (message,) = logger.messages("WARNING")
        assert "repository=octocat/slow" in message
        assert "error_category=timeout" in message
        assert message.endswith("error_message=timed out")

    def test_invalid_name_and_page_retry(self) -> None:
        """Recovered problems log at WARNING."""
        logger = RecordingLogger()
        events = ActivityEventLogger(logger)

        events.log_invalid_name("broken")
        events.log_page_retry(1, ConnectorError.http_error(503), 0.5)

        assert logger.messages("WARNING") == [
            "[activity.repository.invalid_name] repository='broken'",
            "[activity.page.retry] attempt=1 delay_seconds=0.500 upstream_status=503 "
            "error_message=GitHub API request failed with HTTP 503",
        ]
