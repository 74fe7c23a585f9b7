"""Typed models for GitHub repositories, commits and activity results.

Upstream payloads are decoded straight into these msgspec structs; unknown
fields are ignored. ``RepositoryRecord`` and ``CommitRecord`` mirror what
GitHub sends, while ``Repository``, ``Commit`` and ``ActivityResult`` are the
shapes gitpulse returns to its callers.
"""

from __future__ import annotations

import dataclasses
import datetime as dt  # noqa: TC003
import typing as typ

import msgspec


@dataclasses.dataclass(frozen=True, slots=True)
class FetchRequest:
    """Input to a single activity run.

    Attributes
    ----------
    username
        GitHub login whose repositories are listed.
    page_size
        Number of repositories requested per listing page.
    commit_limit
        Maximum number of recent commits kept per repository.

    """

    username: str
    page_size: int = 30
    commit_limit: int = 20

    def __post_init__(self) -> None:
        """Reject requests that could never be issued upstream."""
        if not self.username.strip():
            msg = "username must be non-empty"
            raise ValueError(msg)
        if self.page_size < 1:
            msg = f"page_size must be positive, got {self.page_size}"
            raise ValueError(msg)
        if self.commit_limit < 1:
            msg = f"commit_limit must be positive, got {self.commit_limit}"
            raise ValueError(msg)


class CommitIdentity(msgspec.Struct, kw_only=True, frozen=True):
    """Git author or committer identity recorded on a commit."""

    name: str | None = None
    email: str | None = None
    date: dt.datetime | None = None


class Commit(msgspec.Struct, kw_only=True, frozen=True):
    """A commit as reported in ``recentCommits``."""

    sha: str
    url: str | None = None
    message: str = ""
    author: CommitIdentity = msgspec.field(default_factory=CommitIdentity)
    committer: CommitIdentity = msgspec.field(default_factory=CommitIdentity)


class _CommitDetails(msgspec.Struct, kw_only=True, frozen=True):
    message: str | None = None
    author: CommitIdentity | None = None
    committer: CommitIdentity | None = None


class CommitRecord(msgspec.Struct, kw_only=True, frozen=True):
    """Element of ``GET /repos/{owner}/{repo}/commits``."""

    sha: str
    html_url: str | None = None
    commit: _CommitDetails = msgspec.field(default_factory=_CommitDetails)

    def to_commit(self) -> Commit:
        """Flatten the nested git commit details."""
        details = self.commit
        return Commit(
            sha=self.sha,
            url=self.html_url,
            message=details.message or "",
            author=details.author or CommitIdentity(),
            committer=details.committer or CommitIdentity(),
        )


class RepositoryRecord(msgspec.Struct, kw_only=True, frozen=True):
    """Element of ``GET /users/{username}/repos``."""

    id: int
    name: str
    full_name: str
    description: str | None = None
    html_url: str | None = None
    clone_url: str | None = None
    created_at: dt.datetime | None = None
    updated_at: dt.datetime | None = None
    pushed_at: dt.datetime | None = None
    size: int = 0
    stargazers_count: int = 0
    forks_count: int = 0
    language: str | None = None
    default_branch: str | None = None


class Repository(RepositoryRecord, kw_only=True, frozen=True):
    """A listed repository merged with its recent commits."""

    recent_commits: tuple[Commit, ...] = msgspec.field(
        default=(), name="recentCommits"
    )

    @classmethod
    def from_record(
        cls, record: RepositoryRecord, commits: typ.Iterable[Commit]
    ) -> Repository:
        """Attach ``commits`` to an upstream repository record."""
        return cls(**msgspec.structs.asdict(record), recent_commits=tuple(commits))


class RateLimitSnapshot(msgspec.Struct, kw_only=True, frozen=True, rename="camel"):
    """GitHub API quota as last observed."""

    remaining: int
    limit: int
    reset_at: dt.datetime


class ActivityResult(msgspec.Struct, kw_only=True, frozen=True, rename="camel"):
    """Aggregate response of one activity run.

    ``total_repositories`` always equals ``len(repositories)``; build results
    with :meth:`assemble` to have it computed.
    """

    username: str
    fetched_at: dt.datetime
    total_repositories: int
    repositories: tuple[Repository, ...]
    rate_limit_info: RateLimitSnapshot

    def __post_init__(self) -> None:
        """Enforce the repository count invariant."""
        if self.total_repositories != len(self.repositories):
            msg = (
                f"total_repositories={self.total_repositories} does not match "
                f"{len(self.repositories)} repositories"
            )
            raise ValueError(msg)

    @classmethod
    def assemble(
        cls,
        *,
        username: str,
        fetched_at: dt.datetime,
        repositories: typ.Sequence[Repository],
        rate_limit_info: RateLimitSnapshot,
    ) -> ActivityResult:
        """Build a result, deriving ``total_repositories`` from the sequence."""
        return cls(
            username=username,
            fetched_at=fetched_at,
            total_repositories=len(repositories),
            repositories=tuple(repositories),
            rate_limit_info=rate_limit_info,
        )


@dataclasses.dataclass(frozen=True)
class Page[T]:
    """One page of a paginated GitHub listing."""

    items: tuple[T, ...]
    rate_limit: RateLimitSnapshot | None = None


@dataclasses.dataclass(frozen=True, slots=True)
class CommitWindow:
    """Recent commits of one repository plus the quota seen fetching them."""

    commits: tuple[Commit, ...] = ()
    rate_limit: RateLimitSnapshot | None = None
