"""Probe resource for liveness and readiness checks.

Probes never touch GitHub, so they answer even when the service runs without
a token.

Usage
-----
Register the probes on the Falcon app::

    app.add_route("/health", ProbeResource("ok"))
    app.add_route("/ready", ProbeResource("ready"))

"""

from __future__ import annotations

import typing as typ
from http import HTTPStatus

if typ.TYPE_CHECKING:
    from falcon.asgi import Request, Response

__all__ = ["ProbeResource"]


class ProbeResource:
    """Answer ``GET`` with HTTP 200 and ``{"status": <status>}``."""

    def __init__(self, status: str) -> None:
        """Store the status string reported by this probe."""
        self._status = status

    async def on_get(self, _req: Request, resp: Response) -> None:
        """Handle probe requests.

        Parameters
        ----------
        _req
            Falcon request (unused).
        resp
            Falcon response populated with the probe status.

        """
        resp.media = {"status": self._status}
        resp.status = HTTPStatus.OK
