"""Probe resources for container liveness and readiness checks.

Probes never touch GitHub, the response cache or the site files, so they
answer even when every page would render an inline error.

Usage
-----
Register both probes on the Falcon app::

    from issuepress.api.health.resources import ProbeResource

    app.add_route("/health", ProbeResource("ok"))
    app.add_route("/ready", ProbeResource("ready"))

"""

from __future__ import annotations

import typing as typ
from http import HTTPStatus

if typ.TYPE_CHECKING:
    from falcon.asgi import Request, Response

__all__ = ["HEALTH_STATUS", "READY_STATUS", "ProbeResource"]

HEALTH_STATUS = "ok"
READY_STATUS = "ready"


class ProbeResource:
    """Answer GET with ``{"status": <status>}`` and HTTP 200.

    Parameters
    ----------
    status
        Value reported in the ``status`` field.

    """

    def __init__(self, status: str) -> None:
        """Store the status reported by this probe."""
        self._status = status

    async def on_get(self, _req: Request, resp: Response) -> None:
        """Handle GET requests for the probe route."""
        resp.media = {"status": self._status}
        resp.status = HTTPStatus.OK
