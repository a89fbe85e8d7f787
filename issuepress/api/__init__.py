"""issuepress HTTP layer.

This package provides the Falcon Asynchronous Server Gateway Interface
(ASGI) application that serves the blog pages and the health probes.

Usage
-----
Create the application::

    from issuepress.api import AppDependencies, create_app

    app = create_app(AppDependencies(site_root=root, services=services))

Public API
----------
AppDependencies
    Site root and startup services shared by the page routes.
create_app
    Application factory registering page, probe and static routes.
"""

from issuepress.api.app import AppDependencies, create_app

__all__ = ["AppDependencies", "create_app"]
