"""issuepress runtime entrypoint.

This module provides the ASGI application factory used by Granian. It
resolves the data source once, builds the shared GitHub client and
response cache, and delegates route wiring to
:func:`issuepress.api.app.create_app`.

Configuration is driven by environment variables:

- ``ISSUEPRESS_SITE_ROOT``: Directory holding ``data/`` and ``assets/``
  (default ``.``)
- ``ISSUEPRESS_CACHE_PATH``: Response cache file (default
  ``<site root>/.cache/responses.json``)
- ``ISSUEPRESS_HOST``: Bind address (default ``0.0.0.0``)
- ``ISSUEPRESS_PORT``: Listen port (default ``8080``)
- ``ISSUEPRESS_LOG_LEVEL``: Log level (default ``INFO``)
- ``GITHUB_TOKEN``: Optional token for authenticated GitHub requests

Run the service directly with ``python -m issuepress.runtime``.
"""

from __future__ import annotations

import dataclasses as dc
import os
import typing as typ
from pathlib import Path

from issuepress.github.cache import CachedFetcher, FileResponseCache
from issuepress.github.client import GitHubRestClient, GitHubRestConfig
from issuepress.logging import (
    configure_logging,
    get_logger,
    log_error,
    log_info,
    log_warning,
)
from issuepress.site.pages import SiteServices
from issuepress.site.source import resolve_data_source

if typ.TYPE_CHECKING:
    import falcon.asgi

__all__ = ["RuntimeConfig", "build_services", "create_app", "main"]

logger = get_logger(__name__)

SNAPSHOT_PATH = "data/db.json"
DEFAULT_CACHE_PATH = ".cache/responses.json"

# TCP port number range limits
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
            "Invalid ISSUEPRESS_PORT value: %r (must be %d-%d): %s",
            port_str,
            _MIN_PORT,
            _MAX_PORT,
            exc,
        )
        raise SystemExit(1) from exc
    return port


@dc.dataclass(frozen=True, slots=True)
class RuntimeConfig:
    """Filesystem locations used by the running site.

    Attributes
    ----------
    site_root
        Directory holding ``data/``, ``assets/`` and template overrides.
    cache_path
        JSON file backing the response cache.

    """

    site_root: Path
    cache_path: Path

    @property
    def snapshot_path(self) -> Path:
        """Return the location of the optional post snapshot."""
        return self.site_root / SNAPSHOT_PATH

    @classmethod
    def from_env(cls) -> RuntimeConfig:
        """Build configuration from ``ISSUEPRESS_*`` environment variables."""
        site_root = Path(os.environ.get("ISSUEPRESS_SITE_ROOT", ".")).expanduser()
        cache_env = os.environ.get("ISSUEPRESS_CACHE_PATH", "").strip()
        cache_path = (
            Path(cache_env).expanduser() if cache_env else site_root / DEFAULT_CACHE_PATH
        )
        return cls(site_root=site_root, cache_path=cache_path)


def build_services(
    config: RuntimeConfig, *, client: GitHubRestClient | None = None
) -> SiteServices:
    """Build the GitHub client, cached fetcher and resolved data source."""
    client = client or GitHubRestClient(GitHubRestConfig.from_env())
    fetcher = CachedFetcher(client.get_json, FileResponseCache(config.cache_path))
    source = resolve_data_source(config.snapshot_path, client=client, fetcher=fetcher)
    log_info(
        logger,
        "Serving %s with %s data source (cache %s)",
        config.site_root,
        source.kind,
        config.cache_path,
    )
    return SiteServices(source=source, client=client, fetcher=fetcher)


def create_app() -> falcon.asgi.App:
    """Create and configure the Falcon ASGI application.

    Returns
    -------
    falcon.asgi.App
        Configured Falcon ASGI application.

    """
    from issuepress.api.app import AppDependencies
    from issuepress.api.app import create_app as _create_api_app

    config = RuntimeConfig.from_env()
    services = build_services(config)
    return _create_api_app(
        AppDependencies(site_root=config.site_root, services=services)
    )


def main() -> None:
    """Start the issuepress server using Granian.

    Reads ``ISSUEPRESS_HOST``, ``ISSUEPRESS_PORT``, and
    ``ISSUEPRESS_LOG_LEVEL`` from the environment and starts the ASGI server.
    """
    from granian import Granian
    from granian.constants import Interfaces

    host = os.environ.get("ISSUEPRESS_HOST", "0.0.0.0")  # noqa: S104 - bind all interfaces for container
    port_str = os.environ.get("ISSUEPRESS_PORT", "8080")
    port = _parse_port(port_str)
    log_level_str = os.environ.get("ISSUEPRESS_LOG_LEVEL", "INFO")

    normalized_level, invalid_level = configure_logging(log_level_str)
    if invalid_level:
        log_warning(
            logger,
            "Invalid ISSUEPRESS_LOG_LEVEL %r, falling back to %s",
            log_level_str,
            normalized_level,
        )

    log_info(
        logger,
        "Starting issuepress on %s:%d (log_level=%s)",
        host,
        port,
        normalized_level,
    )

    server = Granian(
        "issuepress.runtime:create_app",
        address=host,
        port=port,
        interface=Interfaces.ASGI,
        factory=True,
    )
    server.serve()


if __name__ == "__main__":
    main()
