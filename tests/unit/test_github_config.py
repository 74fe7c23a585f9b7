"""Unit tests for GitHub client configuration."""

from __future__ import annotations

import pytest

from gitpulse.github.config import GitHubConfig
from gitpulse.github.errors import GitHubConfigError

_ENV_VARS = (
    "GITPULSE_GITHUB_TOKEN",
    "GITPULSE_GITHUB_API_URL",
    "GITPULSE_DEFAULT_PAGE_SIZE",
    "GITPULSE_MAX_RETRIES",
    "GITPULSE_RETRY_DELAY_MS",
    "GITPULSE_TIMEOUT_SECONDS",
)


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    """Remove every gitpulse GitHub variable from the environment."""
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestFromEnv:
    """Environment parsing."""

    def test_defaults(self, clean_env: pytest.MonkeyPatch) -> None:
        """Only the token is required."""
        clean_env.setenv("GITPULSE_GITHUB_TOKEN", "  ghp_abc  ")

        config = GitHubConfig.from_env()

        assert config == GitHubConfig(token="ghp_abc"), "unexpected defaults"
        assert config.api_url == "https://api.github.com"
        assert config.default_page_size == 30
        assert config.user_agent == "gitpulse/0.1"

    def test_overrides(self, clean_env: pytest.MonkeyPatch) -> None:
        """Every setting can be overridden."""
        clean_env.setenv("GITPULSE_GITHUB_TOKEN", "ghp_abc")
        clean_env.setenv("GITPULSE_GITHUB_API_URL", "https://ghe.example/api/v3")
        clean_env.setenv("GITPULSE_DEFAULT_PAGE_SIZE", "50")
        clean_env.setenv("GITPULSE_MAX_RETRIES", "5")
        clean_env.setenv("GITPULSE_RETRY_DELAY_MS", "250")
        clean_env.setenv("GITPULSE_TIMEOUT_SECONDS", "12")

        config = GitHubConfig.from_env()

        assert config.api_url == "https://ghe.example/api/v3"
        assert config.default_page_size == 50
        assert config.max_retries == 5
        assert config.retry_delay_ms == 250
        assert config.timeout_s == 12

    def test_missing_token(self, clean_env: pytest.MonkeyPatch) -> None:
        """A missing token is a configuration error."""
        with pytest.raises(GitHubConfigError, match="GITPULSE_GITHUB_TOKEN"):
            GitHubConfig.from_env()

    @pytest.mark.parametrize("raw", ["0", "-3", "ten"])
    def test_rejects_non_positive_integers(
        self, clean_env: pytest.MonkeyPatch, raw: str
    ) -> None:
        """Integer settings must be positive."""
        clean_env.setenv("GITPULSE_GITHUB_TOKEN", "ghp_abc")
        clean_env.setenv("GITPULSE_MAX_RETRIES", raw)

        with pytest.raises(GitHubConfigError, match="GITPULSE_MAX_RETRIES"):
            GitHubConfig.from_env()

    def test_blank_api_url(self, clean_env: pytest.MonkeyPatch) -> None:
        """An explicitly blank API URL is rejected."""
        clean_env.setenv("GITPULSE_GITHUB_TOKEN", "ghp_abc")
        clean_env.setenv("GITPULSE_GITHUB_API_URL", "   ")

        with pytest.raises(GitHubConfigError, match="GITPULSE_GITHUB_API_URL"):
            GitHubConfig.from_env()


def test_direct_construction_validates() -> None:
    """Constructing the dataclass applies the same checks."""
    with pytest.raises(GitHubConfigError, match="non-empty"):
        GitHubConfig(token=" ")
    with pytest.raises(GitHubConfigError, match="default_page_size"):
        GitHubConfig(token="ghp_abc", default_page_size=0)


def test_retry_policy_derivation() -> None:
    """max_retries counts attempts and retry_delay_ms seeds the backoff."""
    config = GitHubConfig(token="ghp_abc", max_retries=4, retry_delay_ms=200)
    policy = config.retry_policy()
    assert policy.max_attempts == 4
    assert policy.base_delay_s == pytest.approx(0.2)
