"""Lifespan middleware releasing the shared GitHub HTTP client.

Usage
-----
Register the middleware when creating the Falcon app::

    app = falcon.asgi.App(middleware=[ClientLifespan(client)])

"""

from __future__ import annotations

import typing as typ

from issuepress.logging import get_logger, log_info

if typ.TYPE_CHECKING:
    from issuepress.github.client import GitHubRestClient

__all__ = ["ClientLifespan"]

logger = get_logger(__name__)


class ClientLifespan:
    """Close the GitHub client when the ASGI server shuts down.

    Parameters
    ----------
    client
        Client whose connection pool is released at shutdown. A client
        built around an injected ``httpx.AsyncClient`` leaves that client
        open.

    """

    def __init__(self, client: GitHubRestClient) -> None:
        """Store the client to close at shutdown."""
        self._client = client

    async def process_shutdown(
        self, _scope: dict[str, typ.Any], _event: dict[str, typ.Any]
    ) -> None:
        """Handle the ASGI ``lifespan.shutdown`` event."""
        await self._client.aclose()
        log_info(logger, "GitHub client closed")
