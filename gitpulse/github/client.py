"""GitHub REST client used by the activity service.

Every public fetch issues exactly one logical page request (repeated only by
the retry policy) and either returns a typed :class:`Page` or raises a
:class:`ConnectorError`.
"""

from __future__ import annotations

import typing as typ
import urllib.parse

import httpx
import msgspec

from gitpulse.logging import get_logger, log_debug

from .mapping import map_exception, map_status_code
from .models import CommitRecord, Page, RepositoryRecord
from .rate_limit import parse_rate_limit_headers
from .retry import RetryPolicy, call_with_retries

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from .config import GitHubConfig
    from .models import Commit
    from .retry import RetryListener

logger = get_logger(__name__)

_HTTP_ERROR_STATUS_THRESHOLD = 400
_GITHUB_MEDIA_TYPE = "application/vnd.github+json"

_REPOSITORY_PAGE_DECODER = msgspec.json.Decoder(list[RepositoryRecord])
_COMMIT_PAGE_DECODER = msgspec.json.Decoder(list[CommitRecord])


class GitHubPageSource(typ.Protocol):
    """Interface for fetching single pages of GitHub listings."""

    async def fetch_repositories_page(
        self, username: str, *, page: int, per_page: int
    ) -> Page[RepositoryRecord]:
        """Return one page of a user's repositories, most recently updated first."""
        ...

    async def fetch_commits_page(
        self, owner: str, repo: str, *, page: int, per_page: int
    ) -> Page[Commit]:
        """Return one page of a repository's commits, newest first."""
        ...


def _segment(value: str) -> str:
    """Quote ``value`` for use as a single URL path segment."""
    return urllib.parse.quote(value, safe="")


def _error_detail(response: httpx.Response) -> str:
    """Return GitHub's ``message`` field from an error body, if any."""
    try:
        payload = response.json()
    except ValueError:
        return ""
    if isinstance(payload, dict):
        message = payload.get("message")
        if isinstance(message, str):
            return message
    return ""


class GitHubRestClient:
    """GitHub REST implementation of :class:`GitHubPageSource`."""

    def __init__(
        self,
        config: GitHubConfig,
        *,
        http_client: httpx.AsyncClient | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        retry_policy: RetryPolicy | None = None,
        on_retry: RetryListener | None = None,
    ) -> None:
        """Initialise the client with the provided API configuration.

        Parameters
        ----------
        config
            Base URL, credential and timeouts.
        http_client
            Optional pre-built client, typically wrapping a mock transport in
            tests. When omitted the instance creates and owns its own client.
        transport
            Transport for the owned client; ignored when ``http_client`` is
            given.
        retry_policy
            Backoff schedule for transient failures; defaults to the policy
            derived from ``config``.
        on_retry
            Optional callback notified before each retry pause.

        """
        self._config = config
        self._retry_policy = retry_policy or config.retry_policy()
        self._on_retry = on_retry
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(
            base_url=config.api_url,
            timeout=config.timeout_s,
            transport=transport,
            headers={
                "Authorization": f"Bearer {config.token}",
                "User-Agent": config.user_agent,
                "Accept": _GITHUB_MEDIA_TYPE,
            },
        )

    @property
    def config(self) -> GitHubConfig:
        """Read-only access to the client configuration."""
        return self._config

    async def aclose(self) -> None:
        """Close any owned HTTP resources."""
        if self._owns_client:
            await self._client.aclose()

    async def fetch_repositories_page(
        self, username: str, *, page: int, per_page: int
    ) -> Page[RepositoryRecord]:
        """Return one page of ``GET /users/{username}/repos`` sorted by update."""
        return await self._fetch_page(
            f"/users/{_segment(username)}/repos",
            {"page": page, "per_page": per_page, "sort": "updated"},
            _REPOSITORY_PAGE_DECODER.decode,
        )

    async def fetch_commits_page(
        self, owner: str, repo: str, *, page: int, per_page: int
    ) -> Page[Commit]:
        """Return one page of ``GET /repos/{owner}/{repo}/commits``."""
        raw = await self._fetch_page(
            f"/repos/{_segment(owner)}/{_segment(repo)}/commits",
            {"per_page": per_page, "page": page},
            _COMMIT_PAGE_DECODER.decode,
        )
        return Page(
            items=tuple(record.to_commit() for record in raw.items),
            rate_limit=raw.rate_limit,
        )

    async def _fetch_page[T](
        self,
        path: str,
        params: dict[str, str | int],
        decode: cabc.Callable[[bytes], list[T]],
    ) -> Page[T]:
        """Fetch and decode one page, retrying transient failures."""
        return await call_with_retries(
            lambda: self._get_page(path, params, decode),
            policy=self._retry_policy,
            on_retry=self._on_retry,
        )

    async def _get_page[T](
        self,
        path: str,
        params: dict[str, str | int],
        decode: cabc.Callable[[bytes], list[T]],
    ) -> Page[T]:
        """Perform a single GET and decode a JSON array body."""
        log_debug(logger, "GET %s params=%s", path, params)
        try:
            response = await self._client.get(path, params=params)
        except httpx.HTTPError as exc:
            raise map_exception(exc) from exc

        if response.status_code >= _HTTP_ERROR_STATUS_THRESHOLD:
            raise map_status_code(response.status_code, _error_detail(response))

        try:
            items = decode(response.content)
        except msgspec.DecodeError as exc:
            raise map_exception(exc) from exc

        return Page(
            items=tuple(items),
            rate_limit=parse_rate_limit_headers(response.headers),
        )


__all__ = ["GitHubPageSource", "GitHubRestClient"]
