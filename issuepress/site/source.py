"""Post data sources: a local snapshot or the live GitHub API.

The source is resolved once at startup. When ``data/db.json`` loads, every
read is served from it and no network call is made. Otherwise reads go to
the GitHub REST API through the TTL response cache.

The two sources paginate differently. A snapshot knows the exact number of
pages; the API only reveals whether the current page was full, which hints
that another page may follow. :class:`ExactPages` and :class:`UnknownPages`
keep that difference visible to callers.
"""

from __future__ import annotations

import dataclasses as dc
import enum
import math
import typing as typ

import msgspec

from issuepress.github.errors import GitHubResponseShapeError
from issuepress.github.models import GitHubUser, Issue
from issuepress.logging import get_logger, log_info, log_warning

from .errors import PostNotFoundError

if typ.TYPE_CHECKING:
    from pathlib import Path

    from issuepress.github.cache import CachedFetcher
    from issuepress.github.client import GitHubRestClient

    from .config import SiteConfig

logger = get_logger(__name__)


class DataSourceKind(enum.StrEnum):
    """Where post data is read from."""

    SNAPSHOT = "snapshot"
    API = "api"


@dc.dataclass(frozen=True, slots=True)
class ExactPages:
    """Pagination with a known page count."""

    total_pages: int


@dc.dataclass(frozen=True, slots=True)
class UnknownPages:
    """Pagination where only the presence of a further page can be guessed."""

    has_more: bool


Pagination = ExactPages | UnknownPages


@dc.dataclass(frozen=True, slots=True)
class PostPage:
    """One page of posts.

    Attributes
    ----------
    posts
        Posts on this page, pull requests already removed.
    page
        The page actually served, after clamping.
    pagination
        Exact page count (snapshot) or a "has more" hint (API).

    """

    posts: list[Issue]
    page: int
    pagination: Pagination


class PostSource(typ.Protocol):
    """Read access to posts, shared by both data sources."""

    kind: DataSourceKind

    async def list_posts(
        self, config: SiteConfig, *, page: int, label: str | None = None
    ) -> PostPage:
        """Return one page of posts, optionally filtered by label name."""
        ...

    async def get_post(self, config: SiteConfig, number: int) -> Issue:
        """Return the post with the given issue number."""
        ...


def exclude_pull_requests(issues: typ.Iterable[Issue]) -> list[Issue]:
    """Return the issues that are not pull requests."""
    return [issue for issue in issues if not issue.is_pull_request]


def filter_by_label(issues: typ.Iterable[Issue], label: str | None) -> list[Issue]:
    """Return the issues carrying a label named exactly ``label``."""
    if not label:
        return list(issues)
    return [issue for issue in issues if issue.has_label(label)]


def clamp_page(page: int, total_pages: int) -> int:
    """Clamp ``page`` into ``[1, total_pages]``; an empty set yields page 1."""
    if page < 1:
        return 1
    if total_pages > 0 and page > total_pages:
        return total_pages
    return page


class SnapshotSource:
    """Serve posts from an in-memory snapshot with exact pagination."""

    kind = DataSourceKind.SNAPSHOT

    def __init__(self, issues: list[Issue]) -> None:
        """Hold the snapshot issues in their stored order."""
        self._issues = issues

    def __len__(self) -> int:
        """Return the number of records in the snapshot."""
        return len(self._issues)

    async def list_posts(
        self, config: SiteConfig, *, page: int, label: str | None = None
    ) -> PostPage:
        """Filter, then slice the snapshot to the requested page."""
        posts = exclude_pull_requests(filter_by_label(self._issues, label))
        total_pages = math.ceil(len(posts) / config.per_page)
        page = clamp_page(page, total_pages)
        start = (page - 1) * config.per_page
        return PostPage(
            posts=posts[start : start + config.per_page],
            page=page,
            pagination=ExactPages(total_pages),
        )

    async def get_post(self, config: SiteConfig, number: int) -> Issue:
        """Look the post up by number; the snapshot is authoritative."""
        del config
        for issue in self._issues:
            if issue.number == number:
                return issue
        raise PostNotFoundError(number)


class ApiSource:
    """Serve posts from the GitHub REST API through the response cache."""

    kind = DataSourceKind.API

    def __init__(self, client: GitHubRestClient, fetcher: CachedFetcher) -> None:
        """Use ``client`` to build URLs and ``fetcher`` to retrieve them."""
        self._client = client
        self._fetcher = fetcher

    async def list_posts(
        self, config: SiteConfig, *, page: int, label: str | None = None
    ) -> PostPage:
        """Fetch one API page; GitHub applies the label filter and paging.

        ``has_more`` is judged from the raw page size, before pull requests
        are dropped, so a page made entirely of pull requests still points
        at the next page.
        """
        page = max(page, 1)
        url = self._client.issues_url(
            config.username,
            config.repo_name,
            page=page,
            per_page=config.per_page,
            labels=label,
            creator=config.username,
        )
        raw = await self._fetcher.fetch(url, ttl_ms=config.cache_ttl)
        if not isinstance(raw, list):
            raise GitHubResponseShapeError.expected("a list of issues", url)
        issues = msgspec.convert(raw, type=list[Issue])
        return PostPage(
            posts=exclude_pull_requests(issues),
            page=page,
            pagination=UnknownPages(has_more=len(raw) == config.per_page),
        )

    async def get_post(self, config: SiteConfig, number: int) -> Issue:
        """Fetch a single issue by number."""
        url = self._client.issue_url(config.username, config.repo_name, number)
        raw = await self._fetcher.fetch(url, ttl_ms=config.cache_ttl)
        return msgspec.convert(raw, type=Issue)


async def fetch_user(
    client: GitHubRestClient, fetcher: CachedFetcher, config: SiteConfig
) -> GitHubUser:
    """Fetch the configured user's public profile through the cache.

    Profiles are never part of a snapshot, so this always uses the API.
    """
    url = client.user_url(config.username)
    raw = await fetcher.fetch(url, ttl_ms=config.cache_ttl)
    return msgspec.convert(raw, type=GitHubUser)


_SNAPSHOT_DECODER = msgspec.json.Decoder(list[Issue])


def load_snapshot(path: Path) -> list[Issue] | None:
    """Load a snapshot file, or return None when none is usable.

    A missing file is the normal API-mode setup and is not logged. A file
    that cannot be decoded is logged and ignored.
    """
    if not path.exists():
        return None
    try:
        issues = _SNAPSHOT_DECODER.decode(path.read_bytes())
    except (OSError, msgspec.DecodeError) as exc:
        log_warning(
            logger, "Snapshot %s could not be loaded, using the API: %s", path, exc
        )
        return None
    log_info(logger, "Loaded %d issues from snapshot %s", len(issues), path)
    return issues


def resolve_data_source(
    snapshot_path: Path,
    *,
    client: GitHubRestClient,
    fetcher: CachedFetcher,
) -> SnapshotSource | ApiSource:
    """Pick the data source for the lifetime of the application."""
    issues = load_snapshot(snapshot_path)
    if issues is not None:
        return SnapshotSource(issues)
    log_info(
        logger, "No snapshot at %s; serving posts from the GitHub API", snapshot_path
    )
    return ApiSource(client, fetcher)
