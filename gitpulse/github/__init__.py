"""GitHub REST client, pagination and activity aggregation."""

from __future__ import annotations

from .activity import ActivityConfig, ActivityService
from .client import GitHubPageSource, GitHubRestClient
from .config import GitHubConfig
from .errors import ConnectorError, ErrorCode, GitHubConfigError
from .mapping import map_exception, map_status_code
from .models import (
    ActivityResult,
    Commit,
    CommitIdentity,
    CommitWindow,
    FetchRequest,
    Page,
    RateLimitSnapshot,
    Repository,
    RepositoryRecord,
)
from .observability import (
    ActivityEventLogger,
    ActivityEventType,
    ErrorCategory,
    categorize_error,
)
from .pagination import fetch_recent_commits, iter_repositories, iter_repository_pages
from .retry import RetryPolicy, call_with_retries

__all__ = [
    "ActivityConfig",
    "ActivityEventLogger",
    "ActivityEventType",
    "ActivityResult",
    "ActivityService",
    "Commit",
    "CommitIdentity",
    "CommitWindow",
    "ConnectorError",
    "ErrorCategory",
    "ErrorCode",
    "FetchRequest",
    "GitHubConfig",
    "GitHubConfigError",
    "GitHubPageSource",
    "GitHubRestClient",
    "Page",
    "RateLimitSnapshot",
    "Repository",
    "RepositoryRecord",
    "RetryPolicy",
    "call_with_retries",
    "categorize_error",
    "fetch_recent_commits",
    "iter_repositories",
    "iter_repository_pages",
    "map_exception",
    "map_status_code",
]
