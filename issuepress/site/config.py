"""Site settings loaded from ``setting.json``.

Every key is optional; missing keys take the defaults declared on
:class:`SiteConfig`. The loaded value is immutable and is passed explicitly
to each render and fetch call.

Usage
-----
>>> from pathlib import Path
>>> config = load_site_config(Path("data/setting.json"))
>>> config.per_page if config else SiteConfig().per_page
10

"""

from __future__ import annotations

import typing as typ

import msgspec

from issuepress.logging import get_logger, log_warning

from .errors import ConfigReadError

if typ.TYPE_CHECKING:
    from pathlib import Path

logger = get_logger(__name__)

DEFAULT_CACHE_TTL_MS = 60 * 60 * 1000


class NavLabel(msgspec.Struct, kw_only=True, frozen=True):
    """Label shown as a navigation entry."""

    name: str
    color: str | None = None


class Account(msgspec.Struct, kw_only=True, frozen=True):
    """Social account listed in the footer."""

    name: str
    site_url: str
    site_logo: str | None = None


class Project(msgspec.Struct, kw_only=True, frozen=True):
    """Project card shown on the projects page."""

    name: str
    site_url: str
    desc: str = ""
    cover: str | None = None


class SiteConfig(msgspec.Struct, kw_only=True, frozen=True):
    """Read-only site configuration.

    Attributes
    ----------
    username : str
        GitHub account owning the content repository. Only issues created
        by this account are listed in API mode.
    repo_name : str
        Repository whose issues hold the posts.
    per_page : int
        Posts per list page.
    cache_ttl : int
        Response cache lifetime in milliseconds.
    start_time : str | int, optional
        First year of the site; only a leading integer is used.
    about_markdown : str, optional
        Markdown shown on the about page instead of the GitHub bio.

    """

    username: str = "octocat"
    repo_name: str = "Hello-World"
    per_page: int = 10
    cache_ttl: int = DEFAULT_CACHE_TTL_MS
    site_name: str | None = None
    site_slogan: str | None = None
    site_logo: str | None = None
    hero_image: str | None = None
    labels: list[NavLabel] = msgspec.field(default_factory=list)
    accounts: list[Account] = msgspec.field(default_factory=list)
    projects: list[Project] = msgspec.field(default_factory=list)
    start_time: str | int | None = None
    about_markdown: str | None = None

    def __post_init__(self) -> None:
        """Reject settings that would break pagination or caching."""
        if self.per_page < 1:
            msg = f"per_page must be positive, got {self.per_page}"
            raise ValueError(msg)
        if self.cache_ttl < 0:
            msg = f"cache_ttl must not be negative, got {self.cache_ttl}"
            raise ValueError(msg)


def read_site_config(path: Path) -> SiteConfig:
    """Read and validate a settings file.

    Raises
    ------
    ConfigReadError
        If the file is missing, is not JSON, or does not match
        :class:`SiteConfig`.

    """
    try:
        raw = msgspec.json.decode(path.read_bytes())
        return msgspec.convert(raw, type=SiteConfig)
    except (OSError, msgspec.DecodeError, msgspec.ValidationError) as exc:
        raise ConfigReadError.unreadable(path, exc) from exc


def load_site_config(path: Path) -> SiteConfig | None:
    """Return the settings at ``path``, or None when they are unavailable.

    A missing file is silent. A file that exists but cannot be decoded is
    logged and otherwise ignored, so the site falls back to its defaults.
    """
    if not path.exists():
        return None
    try:
        return read_site_config(path)
    except ConfigReadError as exc:
        log_warning(logger, "Ignoring site settings: %s", exc)
        return None
