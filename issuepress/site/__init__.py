"""Blog site: settings, data sources and page rendering."""

from __future__ import annotations

from .config import Account, NavLabel, Project, SiteConfig, load_site_config
from .errors import (
    ConfigReadError,
    InvalidParameterError,
    MissingParameterError,
    ParameterError,
    PostNotFoundError,
)
from .pages import PageRequest, SiteServices, render_page
from .source import (
    ApiSource,
    DataSourceKind,
    ExactPages,
    PostPage,
    SnapshotSource,
    UnknownPages,
    resolve_data_source,
)

__all__ = [
    "Account",
    "ApiSource",
    "ConfigReadError",
    "DataSourceKind",
    "ExactPages",
    "InvalidParameterError",
    "MissingParameterError",
    "NavLabel",
    "PageRequest",
    "ParameterError",
    "PostNotFoundError",
    "PostPage",
    "Project",
    "SiteConfig",
    "SiteServices",
    "SnapshotSource",
    "UnknownPages",
    "load_site_config",
    "render_page",
    "resolve_data_source",
]
