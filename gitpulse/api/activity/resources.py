"""Falcon resources for the repository activity endpoints.

``RepositoryActivityResource`` serves both routes; Falcon's ``suffix``
routing maps the username-in-path variant onto ``on_get_user``.

Usage
-----
Register the resource on the Falcon app::

    resource = RepositoryActivityResource(service, default_page_size=30)
    app.add_route("/api/v1/github/repository-activity", resource)
    app.add_route(
        "/api/v1/github/repository-activity/{username}",
        resource,
        suffix="user",
    )

"""

from __future__ import annotations

import typing as typ
from http import HTTPStatus

import falcon
import msgspec

from gitpulse.api.activity.validation import build_fetch_request, parse_query_int
from gitpulse.api.errors import FieldError, RequestValidationError
from gitpulse.logging import get_logger, log_info

if typ.TYPE_CHECKING:
    from falcon.asgi import Request, Response

    from gitpulse.github.activity import ActivityService
    from gitpulse.github.models import FetchRequest

__all__ = ["RepositoryActivityResource"]

logger = get_logger(__name__)

_BODY_NOT_OBJECT = FieldError("body", "Request body must be a JSON object")


class RepositoryActivityResource:
    """Return a user's repositories together with their recent commits."""

    def __init__(
        self, service: ActivityService, *, default_page_size: int = 30
    ) -> None:
        """Bind the resource to an activity service.

        Parameters
        ----------
        service
            Service that performs the upstream fetches.
        default_page_size
            Repository page size applied when the caller omits ``pageSize``.

        """
        self._service = service
        self._default_page_size = default_page_size

    async def on_post(self, req: Request, resp: Response) -> None:
        """Handle ``POST /api/v1/github/repository-activity``."""
        try:
            media = await req.get_media()
        except (falcon.MediaNotFoundError, falcon.MediaMalformedError) as exc:
            raise RequestValidationError([_BODY_NOT_OBJECT]) from exc
        if not isinstance(media, dict):
            raise RequestValidationError([_BODY_NOT_OBJECT])

        request = build_fetch_request(
            media.get("username"),
            media.get("pageSize"),
            media.get("commitLimit"),
            default_page_size=self._default_page_size,
        )
        await self._respond(request, resp)

    async def on_get_user(
        self, req: Request, resp: Response, *, username: str
    ) -> None:
        """Handle ``GET /api/v1/github/repository-activity/{username}``."""
        request = build_fetch_request(
            username,
            parse_query_int(req.get_param("pageSize")),
            parse_query_int(req.get_param("commitLimit")),
            default_page_size=self._default_page_size,
        )
        await self._respond(request, resp)

    async def _respond(self, request: FetchRequest, resp: Response) -> None:
        log_info(
            logger,
            "Fetching repository activity for %s (page_size=%d, commit_limit=%d)",
            request.username,
            request.page_size,
            request.commit_limit,
        )
        result = await self._service.fetch_activity(request)
        resp.data = msgspec.json.encode(result)
        resp.content_type = falcon.MEDIA_JSON
        resp.status = HTTPStatus.OK
