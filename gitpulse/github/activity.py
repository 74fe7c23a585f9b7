"""Repository activity aggregation for a single GitHub user.

``ActivityService.fetch_activity`` lists every repository of a user, then
loads each repository's recent commits concurrently (at most
``ActivityConfig.max_concurrency`` at a time) and assembles one
:class:`ActivityResult`.

Repository listing is load-bearing: if it fails, the run fails. Commit loading
is best effort: a repository whose commits cannot be loaded for any reason is
still returned, with no recent commits. Only the global deadline cancels the
pending commit fetches and fails the run.

Run states::

    Idle -> FetchingRepositories -> Failed
                                 -> FetchingCommits -> Assembling -> Succeeded
    (any state) --global timeout--> Failed
"""

from __future__ import annotations

import asyncio
import dataclasses
import typing as typ

from gitpulse.common.slug import parse_repo_slug
from gitpulse.common.time import utcnow

from .errors import ConnectorError
from .mapping import map_exception
from .models import ActivityResult, CommitWindow, Repository
from .observability import ActivityEventLogger, ActivityRunContext
from .pagination import (
    DEFAULT_COMMIT_PAGE_SIZE,
    fetch_recent_commits,
    iter_repository_pages,
)
from .rate_limit import select_rate_limit

if typ.TYPE_CHECKING:
    from .client import GitHubPageSource
    from .models import FetchRequest, RateLimitSnapshot, RepositoryRecord


@dataclasses.dataclass(frozen=True, slots=True)
class ActivityConfig:
    """Concurrency and deadline settings for activity runs.

    Attributes
    ----------
    max_concurrency
        Maximum number of repositories whose commits are fetched at once.
    repository_timeout_s
        Deadline for loading one repository's commits; on expiry that
        repository falls back to an empty commit list.
    global_timeout_s
        Deadline for a whole run; on expiry the run fails.
    commit_page_size
        Commits requested per page, independent of the repository page size.

    """

    max_concurrency: int = 5
    repository_timeout_s: float = 10.0
    global_timeout_s: float = 600.0
    commit_page_size: int = DEFAULT_COMMIT_PAGE_SIZE

    def __post_init__(self) -> None:
        """Validate the configured bounds."""
        if self.max_concurrency < 1:
            msg = f"max_concurrency must be >= 1, got {self.max_concurrency}"
            raise ValueError(msg)
        if self.repository_timeout_s <= 0 or self.global_timeout_s <= 0:
            msg = "timeouts must be positive"
            raise ValueError(msg)
        if self.commit_page_size < 1:
            msg = f"commit_page_size must be >= 1, got {self.commit_page_size}"
            raise ValueError(msg)


@dataclasses.dataclass(frozen=True, slots=True)
class _Listing:
    """Outcome of listing a user's repositories."""

    records: tuple[RepositoryRecord, ...]
    rate_limits: tuple[RateLimitSnapshot | None, ...]


class ActivityService:
    """Aggregate a user's repositories with their recent commits."""

    def __init__(
        self,
        client: GitHubPageSource,
        *,
        config: ActivityConfig | None = None,
        event_logger: ActivityEventLogger | None = None,
    ) -> None:
        """Create a service bound to a GitHub page source.

        Parameters
        ----------
        client
            Source of repository and commit pages.
        config
            Concurrency and deadline settings; defaults to
            :class:`ActivityConfig`.
        event_logger
            Structured event sink; defaults to :class:`ActivityEventLogger`.

        """
        self._client = client
        self._config = config or ActivityConfig()
        self._event_logger = event_logger or ActivityEventLogger()

    @property
    def config(self) -> ActivityConfig:
        """Read-only access to the service configuration."""
        return self._config

    async def fetch_activity(self, request: FetchRequest) -> ActivityResult:
        """Return the repositories of ``request.username`` with recent commits.

        Parameters
        ----------
        request
            User, repository page size and per-repository commit limit.

        Returns
        -------
        ActivityResult
            Repositories in upstream order, each with at most
            ``request.commit_limit`` commits, newest first.

        Raises
        ------
        ConnectorError
            If listing repositories fails, the global deadline passes, or
            assembly fails. Unexpected listing or assembly exceptions surface
            as ``INTERNAL_ERROR``.

        """
        started_at = utcnow()
        context = ActivityRunContext(
            username=request.username,
            page_size=request.page_size,
            commit_limit=request.commit_limit,
            started_at=started_at,
        )
        self._event_logger.log_run_started(context)

        try:
            async with asyncio.timeout(self._config.global_timeout_s):
                result = await self._fetch_activity_inner(request)
        except TimeoutError as exc:
            error = ConnectorError.timeout(self._config.global_timeout_s)
            self._event_logger.log_run_failed(context, error, utcnow() - started_at)
            raise error from exc
        except Exception as exc:
            error = map_exception(exc)
            self._event_logger.log_run_failed(context, error, utcnow() - started_at)
            if error is exc:
                raise
            raise error from exc

        self._event_logger.log_run_completed(context, result, utcnow() - started_at)
        return result

    async def _fetch_activity_inner(self, request: FetchRequest) -> ActivityResult:
        listing = await self._list_repositories(request.username, request.page_size)
        windows = await self._load_all_commits(listing.records, request.commit_limit)
        return self._assemble(request.username, listing, windows)

    async def _list_repositories(self, username: str, page_size: int) -> _Listing:
        records: list[RepositoryRecord] = []
        rate_limits: list[RateLimitSnapshot | None] = []
        async for page in iter_repository_pages(
            self._client, username, page_size=page_size
        ):
            records.extend(page.items)
            rate_limits.append(page.rate_limit)
        return _Listing(records=tuple(records), rate_limits=tuple(rate_limits))

    async def _load_all_commits(
        self, records: typ.Sequence[RepositoryRecord], commit_limit: int
    ) -> list[CommitWindow]:
        """Load commits for every record, preserving the order of ``records``."""
        semaphore = asyncio.Semaphore(self._config.max_concurrency)

        async def bounded_load(record: RepositoryRecord) -> CommitWindow:
            async with semaphore:
                return await self._load_commits(record, commit_limit)

        return await asyncio.gather(*(bounded_load(record) for record in records))

    async def _load_commits(
        self, record: RepositoryRecord, commit_limit: int
    ) -> CommitWindow:
        """Load one repository's commits, degrading to an empty window."""
        try:
            owner, name = parse_repo_slug(record.full_name)
        except ValueError:
            self._event_logger.log_invalid_name(record.full_name)
            return CommitWindow()

        try:
            async with asyncio.timeout(self._config.repository_timeout_s):
                return await fetch_recent_commits(
                    self._client,
                    owner,
                    name,
                    limit=commit_limit,
                    page_size=self._config.commit_page_size,
                )
        except Exception as exc:
            self._event_logger.log_commits_skipped(record.full_name, exc)
            return CommitWindow()

    def _assemble(
        self,
        username: str,
        listing: _Listing,
        windows: typ.Sequence[CommitWindow],
    ) -> ActivityResult:
        fetched_at = utcnow()
        repositories = [
            Repository.from_record(record, window.commits)
            for record, window in zip(listing.records, windows, strict=True)
        ]
        rate_limit = select_rate_limit(
            (*listing.rate_limits, *(window.rate_limit for window in windows)),
            now=fetched_at,
        )
        return ActivityResult.assemble(
            username=username,
            fetched_at=fetched_at,
            repositories=repositories,
            rate_limit_info=rate_limit,
        )
