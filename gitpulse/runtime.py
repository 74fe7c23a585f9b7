"""gitpulse runtime entrypoint for container deployments.

This module provides the ASGI application factory used by Granian. It
delegates to :func:`gitpulse.api.app.create_app` while keeping the
``gitpulse.runtime:create_app`` entrypoint stable.

When ``GITPULSE_GITHUB_TOKEN`` is set, the runtime builds the GitHub client
and activity service so the app serves the activity endpoints. Otherwise it
starts in health-only mode.

Configuration is driven by environment variables:

- ``GITPULSE_HOST``: Bind address (default ``0.0.0.0``)
- ``GITPULSE_PORT``: Listen port (default ``8080``)
- ``GITPULSE_LOG_LEVEL``: Log level (default ``INFO``)
- ``GITPULSE_GITHUB_TOKEN`` and the other ``GITPULSE_*`` settings read by
  :meth:`gitpulse.github.config.GitHubConfig.from_env`

Run the service directly with ``python -m gitpulse.runtime``.
"""

from __future__ import annotations

import os
import typing as typ

from gitpulse.logging import (
    configure_logging,
    get_logger,
    log_error,
    log_info,
    log_warning,
)

if typ.TYPE_CHECKING:
    import falcon.asgi

__all__ = ["create_app", "main"]

logger = get_logger(__name__)

_MIN_PORT = 1
_MAX_PORT = 65535


def _parse_port(port_str: str) -> int:
    """Parse and validate a port number string.

    Raises
    ------
    SystemExit
        If port_str is not a valid integer in range 1-65535.

    """
    try:
        port = int(port_str)
        if not (_MIN_PORT <= port <= _MAX_PORT):
            msg = f"port {port} outside valid range {_MIN_PORT}-{_MAX_PORT}"
            raise ValueError(msg)  # noqa: TRY301 - unify conversion and range errors
    except ValueError as exc:
        log_error(
            logger,
            "Invalid GITPULSE_PORT value: %r (must be %d-%d): %s",
            port_str,
            _MIN_PORT,
            _MAX_PORT,
            exc,
        )
        raise SystemExit(1) from exc
    return port


def create_app() -> falcon.asgi.App:
    """Create the Falcon ASGI application from the environment.

    Returns
    -------
    falcon.asgi.App
        The app with activity endpoints when a token is configured, or a
        health-only app otherwise.

    Raises
    ------
    GitHubConfigError
        If a token is present but another GitHub setting is invalid.

    """
    from gitpulse.api.app import create_app as _create_api_app

    if not os.environ.get("GITPULSE_GITHUB_TOKEN", "").strip():
        log_warning(
            logger,
            "GITPULSE_GITHUB_TOKEN is not set; starting in health-only mode",
        )
        return _create_api_app()

    from gitpulse.api.factory import build_app_dependencies

    return _create_api_app(build_app_dependencies())


def main() -> None:
    """Start the gitpulse server using Granian.

    Reads ``GITPULSE_HOST``, ``GITPULSE_PORT``, and ``GITPULSE_LOG_LEVEL``
    from the environment and starts the ASGI server.
    """
    from granian import Granian
    from granian.constants import Interfaces

    host = os.environ.get("GITPULSE_HOST", "0.0.0.0")  # noqa: S104 - bind all interfaces for container
    port = _parse_port(os.environ.get("GITPULSE_PORT", "8080"))
    log_level_str = os.environ.get("GITPULSE_LOG_LEVEL", "INFO")

    normalized_level, invalid_level = configure_logging(log_level_str)
    if invalid_level:
        log_warning(
            logger,
            "Invalid GITPULSE_LOG_LEVEL %r, falling back to %s",
            log_level_str,
            normalized_level,
        )

    log_info(
        logger,
        "Starting gitpulse on %s:%d (log_level=%s)",
        host,
        port,
        normalized_level,
    )

    server = Granian(
        "gitpulse.runtime:create_app",
        address=host,
        port=port,
        interface=Interfaces.ASGI,
        factory=True,
    )
    server.serve()


if __name__ == "__main__":
    main()
