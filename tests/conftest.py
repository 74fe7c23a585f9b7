"""Shared fixtures for unit and feature tests."""

from __future__ import annotations

import pytest

_GITPULSE_ENV = (
    "GITPULSE_GITHUB_TOKEN",
    "GITPULSE_GITHUB_API_URL",
    "GITPULSE_DEFAULT_PAGE_SIZE",
    "GITPULSE_MAX_RETRIES",
    "GITPULSE_RETRY_DELAY_MS",
    "GITPULSE_TIMEOUT_SECONDS",
    "GITPULSE_HOST",
    "GITPULSE_PORT",
    "GITPULSE_LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the developer's gitpulse settings out of every test."""
    for name in _GITPULSE_ENV:
        monkeypatch.delenv(name, raising=False)
