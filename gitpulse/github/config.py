"""Configuration for the GitHub REST client.

Usage
-----
Build configuration explicitly:

>>> config = GitHubConfig(token="ghp_example")
>>> config.default_page_size
30

Or from the environment:

>>> import os
>>> os.environ["GITPULSE_GITHUB_TOKEN"] = "ghp_example"
>>> GitHubConfig.from_env().api_url
'https://api.github.com'

"""

from __future__ import annotations

import dataclasses
import os

from .errors import GitHubConfigError
from .retry import RetryPolicy

_DEFAULT_API_URL = "https://api.github.com"
_DEFAULT_PAGE_SIZE = 30
_DEFAULT_MAX_RETRIES = 3
_DEFAULT_RETRY_DELAY_MS = 500
_DEFAULT_TIMEOUT_S = 30
_DEFAULT_USER_AGENT = "gitpulse/0.1"
_POSITIVE_FIELDS = ("default_page_size", "max_retries", "retry_delay_ms", "timeout_s")


@dataclasses.dataclass(frozen=True, slots=True)
class GitHubConfig:
    """Settings shared by every request to the GitHub REST API.

    Attributes
    ----------
    token
        Static bearer credential attached to every request.
    api_url
        Base URL of the REST API.
    default_page_size
        Repository page size used when a request does not choose one.
    max_retries
        Total attempts per page request, including the first.
    retry_delay_ms
        Delay before the first retry; later retries back off exponentially.
    timeout_s
        Per-request timeout in seconds.
    user_agent
        ``User-Agent`` header value.

    """

    token: str
    api_url: str = _DEFAULT_API_URL
    default_page_size: int = _DEFAULT_PAGE_SIZE
    max_retries: int = _DEFAULT_MAX_RETRIES
    retry_delay_ms: int = _DEFAULT_RETRY_DELAY_MS
    timeout_s: int = _DEFAULT_TIMEOUT_S
    user_agent: str = _DEFAULT_USER_AGENT

    def __post_init__(self) -> None:
        """Validate settings the way ``from_env`` would."""
        if not self.token.strip():
            raise GitHubConfigError.empty_token()
        if not self.api_url.strip():
            raise GitHubConfigError.blank("api_url")
        for name in _POSITIVE_FIELDS:
            value = getattr(self, name)
            if value < 1:
                raise GitHubConfigError.not_positive(name, value)

    def retry_policy(self) -> RetryPolicy:
        """Return the backoff schedule applied to page requests."""
        return RetryPolicy(
            max_attempts=self.max_retries,
            base_delay_s=self.retry_delay_ms / 1000,
        )

    @staticmethod
    def _parse_positive_int(env_var: str, default: int) -> int:
        """Read a positive integer env var, falling back to a default."""
        raw = os.environ.get(env_var, "")
        if not raw.strip():
            return default
        try:
            value = int(raw)
        except ValueError as exc:
            raise GitHubConfigError.not_positive(env_var, raw) from exc
        if value < 1:
            raise GitHubConfigError.not_positive(env_var, raw)
        return value

    @classmethod
    def from_env(cls) -> GitHubConfig:
        """Build configuration from environment variables.

        Reads the following environment variables:

        - ``GITPULSE_GITHUB_TOKEN``: Required bearer token
        - ``GITPULSE_GITHUB_API_URL``: Optional base URL override
        - ``GITPULSE_DEFAULT_PAGE_SIZE``: Optional positive integer
        - ``GITPULSE_MAX_RETRIES``: Optional positive integer
        - ``GITPULSE_RETRY_DELAY_MS``: Optional positive integer
        - ``GITPULSE_TIMEOUT_SECONDS``: Optional positive integer

        Raises
        ------
        GitHubConfigError
            If the token is missing or any value is blank or not positive.

        """
        token = os.environ.get("GITPULSE_GITHUB_TOKEN", "").strip()
        if not token:
            raise GitHubConfigError.missing_token()

        api_url = os.environ.get("GITPULSE_GITHUB_API_URL", _DEFAULT_API_URL).strip()
        if not api_url:
            raise GitHubConfigError.blank("GITPULSE_GITHUB_API_URL")

        return cls(
            token=token,
            api_url=api_url,
            default_page_size=cls._parse_positive_int(
                "GITPULSE_DEFAULT_PAGE_SIZE", _DEFAULT_PAGE_SIZE
            ),
            max_retries=cls._parse_positive_int(
                "GITPULSE_MAX_RETRIES", _DEFAULT_MAX_RETRIES
            ),
            retry_delay_ms=cls._parse_positive_int(
                "GITPULSE_RETRY_DELAY_MS", _DEFAULT_RETRY_DELAY_MS
            ),
            timeout_s=cls._parse_positive_int(
                "GITPULSE_TIMEOUT_SECONDS", _DEFAULT_TIMEOUT_S
            ),
        )
