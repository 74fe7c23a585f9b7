"""Factory for building API dependencies from GitHub configuration.

Usage
-----
Build dependencies from the environment::

    from gitpulse.api.factory import build_app_dependencies

    deps = build_app_dependencies(GitHubConfig.from_env())
    app = create_app(deps)

"""

from __future__ import annotations

import typing as typ

from gitpulse.api.app import AppDependencies
from gitpulse.github.activity import ActivityConfig, ActivityService
from gitpulse.github.client import GitHubRestClient
from gitpulse.github.config import GitHubConfig
from gitpulse.github.observability import ActivityEventLogger

if typ.TYPE_CHECKING:
    import httpx

__all__ = ["build_activity_service", "build_app_dependencies"]


def build_activity_service(
    client: GitHubRestClient,
    *,
    event_logger: ActivityEventLogger | None = None,
    config: ActivityConfig | None = None,
) -> ActivityService:
    """Wrap ``client`` in an :class:`ActivityService` with default settings."""
    return ActivityService(
        client,
        config=config,
        event_logger=event_logger or ActivityEventLogger(),
    )


def build_app_dependencies(
    config: GitHubConfig | None = None,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> AppDependencies:
    """Build the shared client and activity service for the HTTP app.

    Parameters
    ----------
    config
        GitHub settings; read from the environment when omitted.
    transport
        Optional httpx transport for the shared client.

    Returns
    -------
    AppDependencies
        Dependencies with the activity service, the client it shares and the
        configured default page size.

    Raises
    ------
    GitHubConfigError
        If ``config`` is omitted and the environment is invalid.

    """
    github_config = config or GitHubConfig.from_env()
    event_logger = ActivityEventLogger()
    client = GitHubRestClient(
        github_config, transport=transport, on_retry=event_logger.log_page_retry
    )
    return AppDependencies(
        activity_service=build_activity_service(client, event_logger=event_logger),
        github_client=client,
        default_page_size=github_config.default_page_size,
    )
