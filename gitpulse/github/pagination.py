"""Page-number pagination over GitHub REST listings.

GitHub's REST listings are page-number based and return no total count, so a
listing ends at the first page holding fewer items than were asked for. A
listing whose size is an exact multiple of the page size therefore costs one
extra request that comes back empty.
"""

from __future__ import annotations

import contextlib
import functools
import typing as typ
from http import HTTPStatus

from gitpulse.logging import get_logger, log_info

from .errors import ConnectorError
from .models import CommitWindow
from .observability import ActivityEventType

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from .client import GitHubPageSource
    from .models import Commit, Page, RateLimitSnapshot, RepositoryRecord

    type PageFetch[T] = cabc.Callable[..., cabc.Awaitable[Page[T]]]

logger = get_logger(__name__)

DEFAULT_COMMIT_PAGE_SIZE = 50


async def iter_pages[T](
    fetch: PageFetch[T], *, page_size: int
) -> cabc.AsyncIterator[Page[T]]:
    """Yield consecutive pages from ``fetch`` until a short page arrives.

    ``fetch`` is called with ``page`` and ``per_page`` keyword arguments,
    starting at page 1. Page ``n + 1`` is never requested before page ``n``
    has been received. Errors raised by ``fetch`` propagate to the consumer.
    """
    if page_size < 1:
        msg = f"page_size must be positive, got {page_size}"
        raise ValueError(msg)

    page_number = 1
    while True:
        page = await fetch(page=page_number, per_page=page_size)
        yield page
        if len(page.items) < page_size:
            return
        page_number += 1


def iter_repository_pages(
    client: GitHubPageSource, username: str, *, page_size: int
) -> cabc.AsyncIterator[Page[RepositoryRecord]]:
    """Yield every page of ``username``'s repositories in upstream order.

    Each call starts a fresh listing. A failed page aborts the listing with
    its :class:`ConnectorError`; repository lists are never silently
    truncated.
    """
    fetch = functools.partial(client.fetch_repositories_page, username)
    return iter_pages(fetch, page_size=page_size)


async def iter_repositories(
    client: GitHubPageSource, username: str, *, page_size: int
) -> cabc.AsyncIterator[RepositoryRecord]:
    """Yield ``username``'s repositories one by one, most recently updated first."""
    async for page in iter_repository_pages(client, username, page_size=page_size):
        for record in page.items:
            yield record


async def fetch_recent_commits(
    client: GitHubPageSource,
    owner: str,
    repo: str,
    *,
    limit: int,
    page_size: int = DEFAULT_COMMIT_PAGE_SIZE,
) -> CommitWindow:
    """Return up to ``limit`` of the newest commits of ``owner/repo``.

    Pages are requested only while fewer than ``limit`` commits have been
    collected, so at most ``ceil(limit / page_size)`` requests are made. A
    ``409 Conflict`` is GitHub's answer for a repository without commits and
    ends the listing without error.

    Parameters
    ----------
    client
        Page source for the commits listing.
    owner, repo
        Repository coordinates.
    limit
        Maximum number of commits to keep.
    page_size
        Commits requested per page, independent of the repository page size.

    Returns
    -------
    CommitWindow
        Commits newest first, with the last rate-limit snapshot observed.

    Raises
    ------
    ConnectorError
        For any upstream failure other than the empty-repository conflict.

    """
    if limit < 1:
        msg = f"limit must be positive, got {limit}"
        raise ValueError(msg)

    commits: list[Commit] = []
    rate_limit: RateLimitSnapshot | None = None
    fetch = functools.partial(client.fetch_commits_page, owner, repo)
    try:
        async with contextlib.aclosing(iter_pages(fetch, page_size=page_size)) as pages:
            async for page in pages:
                rate_limit = page.rate_limit or rate_limit
                commits.extend(page.items[: limit - len(commits)])
                if len(commits) >= limit:
                    break
    except ConnectorError as exc:
        if exc.upstream_status != HTTPStatus.CONFLICT:
            raise
        log_info(
            logger,
            "[%s] repository=%s/%s",
            ActivityEventType.REPOSITORY_EMPTY,
            owner,
            repo,
        )

    return CommitWindow(commits=tuple(commits), rate_limit=rate_limit)
