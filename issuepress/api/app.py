"""Application factory for the issuepress Falcon ASGI application.

This module provides ``create_app()`` which wires the page routes, the
probe routes and, when their directories exist under the site root, the
static ``/data`` and ``/assets`` routes.

Usage
-----
Build the app from services resolved at startup::

    from issuepress.api.app import AppDependencies, create_app

    deps = AppDependencies(site_root=Path("."), services=services)
    app = create_app(deps)

"""

from __future__ import annotations

import dataclasses as dc
import typing as typ

import falcon.asgi

from issuepress.api.health.resources import HEALTH_STATUS, READY_STATUS, ProbeResource
from issuepress.api.middleware import ClientLifespan
from issuepress.api.pages.resources import PageResource, PageResourceDependencies

if typ.TYPE_CHECKING:
    from pathlib import Path

    from issuepress.site.pages import SiteServices

__all__ = ["PAGE_ROUTES", "STATIC_DIRECTORIES", "AppDependencies", "create_app"]

PAGE_ROUTES: tuple[tuple[str, str], ...] = (
    ("/", "index.html"),
    ("/index.html", "index.html"),
    ("/post.html", "post.html"),
    ("/projects.html", "projects.html"),
    ("/about.html", "about.html"),
)

STATIC_DIRECTORIES = ("data", "assets")


@dc.dataclass(frozen=True, slots=True)
class AppDependencies:
    """Dependencies for the Falcon ASGI application.

    Attributes
    ----------
    site_root
        Directory holding ``data/``, ``assets/`` and template overrides.
    services
        Data source, GitHub client and cached fetcher resolved at startup.

    """

    site_root: Path
    services: SiteServices


def create_app(dependencies: AppDependencies) -> falcon.asgi.App:
    """Create and configure the Falcon ASGI application.

    Parameters
    ----------
    dependencies
        Site root and startup services shared by every page route.

    Returns
    -------
    falcon.asgi.App
        Configured Falcon ASGI application.

    """
    middleware: list[object] = [ClientLifespan(dependencies.services.client)]
    app = falcon.asgi.App(middleware=middleware)  # type: ignore[no-matching-overload]  # Falcon stubs

    app.add_route("/health", ProbeResource(HEALTH_STATUS))
    app.add_route("/ready", ProbeResource(READY_STATUS))

    page_deps = PageResourceDependencies(
        site_root=dependencies.site_root, services=dependencies.services
    )
    resources = {
        template_name: PageResource(template_name, page_deps)
        for _, template_name in PAGE_ROUTES
    }
    for route, template_name in PAGE_ROUTES:
        app.add_route(route, resources[template_name])

    for name in STATIC_DIRECTORIES:
        directory = dependencies.site_root / name
        if directory.is_dir():
            app.add_static_route(f"/{name}", directory.resolve())

    return app
