"""Falcon resources serving the rendered blog pages.

Each page route owns one template. A request reloads ``data/setting.json``
so edits show up without a restart, loads the template (a copy in the site
root wins over the packaged one), and renders it with the data source that
was resolved at startup.

Usage
-----
Register a page on the Falcon app::

    app.add_route(
        "/post.html",
        PageResource("post.html", PageResourceDependencies(site_root, services)),
    )

"""

from __future__ import annotations

import asyncio
import dataclasses as dc
import typing as typ

import falcon

from issuepress.logging import get_logger, log_debug
from issuepress.site.config import load_site_config
from issuepress.site.pages import PageRequest, load_template, render_page

if typ.TYPE_CHECKING:
    from pathlib import Path

    from falcon.asgi import Request, Response

    from issuepress.site.pages import SiteServices

__all__ = ["PageResource", "PageResourceDependencies", "SETTINGS_PATH"]

logger = get_logger(__name__)

SETTINGS_PATH = "data/setting.json"


@dc.dataclass(frozen=True, slots=True)
class PageResourceDependencies:
    """Collaborators shared by every page resource.

    Attributes
    ----------
    site_root
        Directory holding ``data/`` and optional template overrides.
    services
        Data source, GitHub client and cached fetcher.

    """

    site_root: Path
    services: SiteServices


def first_values(params: typ.Mapping[str, typ.Any]) -> dict[str, str]:
    """Collapse repeated query parameters to their first value."""
    collapsed: dict[str, str] = {}
    for name, value in params.items():
        if not isinstance(value, list):
            collapsed[name] = str(value)
        elif value:
            collapsed[name] = str(value[0])
    return collapsed


class PageResource:
    """Render one page template per GET request.

    Rendering failures never escape: the render routines replace their
    container with an inline error, so the response is always HTTP 200.
    """

    def __init__(self, template_name: str, deps: PageResourceDependencies) -> None:
        """Bind the resource to a template and the shared dependencies."""
        self._template_name = template_name
        self._deps = deps

    async def on_get(self, req: Request, resp: Response) -> None:
        """Handle GET requests for the page."""
        root = self._deps.site_root
        settings = await asyncio.to_thread(load_site_config, root / SETTINGS_PATH)
        template = await asyncio.to_thread(load_template, self._template_name, root)
        request = PageRequest(
            page_name=self._template_name,
            url=req.url,
            params=first_values(req.params),
            settings=settings,
        )
        log_debug(
            logger,
            "Rendering %s (settings %s)",
            self._template_name,
            "loaded" if settings is not None else "absent",
        )
        resp.text = await render_page(template, request, self._deps.services)
        resp.content_type = falcon.MEDIA_HTML
