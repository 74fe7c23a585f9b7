"""Structured logging for activity runs.

Events are emitted as ``[event.type] key=value`` lines through femtologging so
log aggregators can parse them without a dedicated metrics pipeline.
"""

from __future__ import annotations

import dataclasses
import enum
import typing as typ
from http import HTTPStatus

from gitpulse.logging import (
    SupportsLog,
    get_logger,
    log_error,
    log_info,
    log_warning,
)

from .errors import ConnectorError, ErrorCode, GitHubConfigError

if typ.TYPE_CHECKING:
    import datetime as dt

    from .models import ActivityResult

_module_logger = get_logger(__name__)


class ActivityEventType(enum.StrEnum):
    """Structured log event types for activity runs."""

    RUN_STARTED = "activity.run.started"
    RUN_COMPLETED = "activity.run.completed"
    RUN_FAILED = "activity.run.failed"
    COMMITS_SKIPPED = "activity.repository.commits_skipped"
    REPOSITORY_EMPTY = "activity.repository.empty"
    INVALID_NAME = "activity.repository.invalid_name"
    PAGE_RETRY = "activity.page.retry"


class ErrorCategory(enum.StrEnum):
    """Categories for error classification in alerts."""

    TRANSIENT = "transient"
    CLIENT_ERROR = "client_error"
    CONFIGURATION = "configuration"
    TIMEOUT = "timeout"
    UNKNOWN = "unknown"


def categorize_error(exc: BaseException) -> ErrorCategory:
    """Categorize an exception for alerting purposes."""
    if isinstance(exc, TimeoutError):
        return ErrorCategory.TIMEOUT
    if isinstance(exc, GitHubConfigError):
        return ErrorCategory.CONFIGURATION
    if not isinstance(exc, ConnectorError):
        return ErrorCategory.UNKNOWN
    if exc.code is ErrorCode.INTERNAL_ERROR:
        return ErrorCategory.UNKNOWN
    if exc.code is ErrorCode.RATE_LIMIT_EXCEEDED or exc.is_transient:
        return ErrorCategory.TRANSIENT
    if (
        exc.upstream_status is not None
        and exc.upstream_status < HTTPStatus.INTERNAL_SERVER_ERROR
    ) or exc.code is ErrorCode.INVALID_REQUEST:
        return ErrorCategory.CLIENT_ERROR
    return ErrorCategory.UNKNOWN


@dataclasses.dataclass(frozen=True, slots=True)
class ActivityRunContext:
    """Shared context for a single activity run."""

    username: str
    page_size: int
    commit_limit: int
    started_at: dt.datetime


class ActivityEventLogger:
    """Emit structured activity events via femtologging.

    Successful runs log at INFO, recovered per-repository problems at WARNING
    and failed runs at ERROR.
    """

    def __init__(self, logger: SupportsLog | None = None) -> None:
        """Bind the event logger to ``logger`` or this module's logger."""
        self._logger: SupportsLog = logger or _module_logger

    def log_run_started(self, context: ActivityRunContext) -> None:
        """Log activity run start."""
        log_info(
            self._logger,
            "[%s] username=%s page_size=%d commit_limit=%d started_at=%s",
            ActivityEventType.RUN_STARTED,
            context.username,
            context.page_size,
            context.commit_limit,
            context.started_at.isoformat(),
        )

    def log_run_completed(
        self,
        context: ActivityRunContext,
        result: ActivityResult,
        duration: dt.timedelta,
    ) -> None:
        """Log a successful run with repository and commit counts."""
        total_commits = sum(len(repo.recent_commits) for repo in result.repositories)
        log_info(
            self._logger,
            "[%s] username=%s duration_seconds=%.3f total_repositories=%d "
            "total_commits=%d rate_limit_remaining=%d",
            ActivityEventType.RUN_COMPLETED,
            context.username,
            duration.total_seconds(),
            result.total_repositories,
            total_commits,
            result.rate_limit_info.remaining,
        )

    def log_run_failed(
        self,
        context: ActivityRunContext,
        error: BaseException,
        duration: dt.timedelta,
    ) -> None:
        """Log a failed run with error categorization."""
        log_error(
            self._logger,
            "[%s] username=%s duration_seconds=%.3f error_type=%s "
            "error_category=%s error_message=%s",
            ActivityEventType.RUN_FAILED,
            context.username,
            duration.total_seconds(),
            type(error).__name__,
            categorize_error(error),
            str(error),
            exc_info=error,
        )

    def log_commits_skipped(self, full_name: str, error: BaseException) -> None:
        """Log a repository whose commits were replaced by an empty list."""
        log_warning(
            self._logger,
            "[%s] repository=%s error_type=%s error_category=%s error_message=%s",
            ActivityEventType.COMMITS_SKIPPED,
            full_name,
            type(error).__name__,
            categorize_error(error),
            str(error) or "timed out",
        )

    def log_invalid_name(self, full_name: str) -> None:
        """Log a repository whose full name cannot be split into owner/repo."""
        log_warning(
            self._logger,
            "[%s] repository=%r",
            ActivityEventType.INVALID_NAME,
            full_name,
        )

    def log_page_retry(
        self, attempt: int, error: ConnectorError, delay_s: float
    ) -> None:
        """Log a transient page failure that is about to be retried."""
        log_warning(
            self._logger,
            "[%s] attempt=%d delay_seconds=%.3f upstream_status=%s error_message=%s",
            ActivityEventType.PAGE_RETRY,
            attempt,
            delay_s,
            error.upstream_status,
            error.message,
        )
