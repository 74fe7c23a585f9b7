"""Lifespan middleware that releases the shared GitHub HTTP client.

The runtime builds one :class:`GitHubRestClient` per process and shares it
across requests, so its connection pool must be closed when the ASGI server
shuts down rather than at the end of any single request.

Usage
-----
Register the middleware when creating the Falcon app::

    app = falcon.asgi.App(middleware=[GitHubClientLifecycle(client)])

"""

from __future__ import annotations

import typing as typ

import httpx

from gitpulse.logging import get_logger, log_error, log_info

if typ.TYPE_CHECKING:
    from gitpulse.github.client import GitHubRestClient

__all__ = ["GitHubClientLifecycle"]

logger = get_logger(__name__)


class GitHubClientLifecycle:
    """Falcon middleware closing a :class:`GitHubRestClient` on shutdown.

    Parameters
    ----------
    client
        Client whose owned connection pool is closed on ASGI shutdown.

    """

    def __init__(self, client: GitHubRestClient) -> None:
        """Initialize the middleware with the client to close."""
        self._client = client

    async def process_shutdown(
        self, _scope: dict[str, typ.Any], _event: dict[str, typ.Any]
    ) -> None:
        """Close the client when the ASGI lifespan ends."""
        try:
            await self._client.aclose()
        except httpx.HTTPError as exc:
            log_error(
                logger,
                "Failed to close GitHub client during shutdown: %s",
                exc,
                exc_info=exc,
            )
            raise
        log_info(logger, "GitHub client closed")
