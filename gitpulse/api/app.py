"""Application factory for the gitpulse Falcon ASGI application.

This module provides ``create_app()`` which builds the Falcon ASGI
application with health probes and, when an activity service is supplied,
the repository activity endpoints.

Usage
-----
Create a health-only app (no GitHub token)::

    app = create_app()

Create a full app::

    from gitpulse.api.app import AppDependencies, create_app

    deps = AppDependencies(activity_service=service, github_client=client)
    app = create_app(deps)

"""

from __future__ import annotations

import dataclasses as dc
import typing as typ

import falcon.asgi

from gitpulse.api.errors import register_error_handlers
from gitpulse.api.health.resources import ProbeResource

if typ.TYPE_CHECKING:
    from gitpulse.github.activity import ActivityService
    from gitpulse.github.client import GitHubRestClient

__all__ = ["ACTIVITY_ROUTE", "AppDependencies", "create_app"]

ACTIVITY_ROUTE = "/api/v1/github/repository-activity"


@dc.dataclass(frozen=True, slots=True)
class AppDependencies:
    """Dependencies for the Falcon ASGI application.

    Attributes
    ----------
    activity_service
        Service behind the activity endpoints. When ``None`` only the probes
        are registered.
    github_client
        Shared client closed on ASGI shutdown, if the app owns one.
    default_page_size
        Repository page size used when a request omits ``pageSize``.

    """

    activity_service: ActivityService | None = None
    github_client: GitHubRestClient | None = None
    default_page_size: int = 30


def create_app(
    dependencies: AppDependencies | None = None,
) -> falcon.asgi.App:
    """Create and configure the Falcon ASGI application.

    Parameters
    ----------
    dependencies
        Optional application dependencies. When ``None``, or when no
        activity service is set, only ``/health`` and ``/ready`` exist.

    Returns
    -------
    falcon.asgi.App
        Configured Falcon ASGI application.

    """
    deps = dependencies or AppDependencies()

    middleware: list[object] = []
    if deps.github_client is not None:
        from gitpulse.api.middleware import GitHubClientLifecycle

        middleware.append(GitHubClientLifecycle(deps.github_client))

    app = falcon.asgi.App(middleware=middleware)  # type: ignore[no-matching-overload]  # Falcon stubs

    app.add_route("/health", ProbeResource("ok"))
    app.add_route("/ready", ProbeResource("ready"))

    if deps.activity_service is not None:
        from gitpulse.api.activity.resources import RepositoryActivityResource

        resource = RepositoryActivityResource(
            deps.activity_service, default_page_size=deps.default_page_size
        )
        app.add_route(ACTIVITY_ROUTE, resource)
        app.add_route(f"{ACTIVITY_ROUTE}/{{username}}", resource, suffix="user")

    register_error_handlers(app)
    return app
