"""Shared fixtures for unit and feature tests."""

from __future__ import annotations

import typing as typ

import pytest

from issuepress.github.cache import CachedFetcher, MemoryResponseCache
from issuepress.github.client import GitHubRestClient
from issuepress.site.config import SiteConfig
from issuepress.site.pages import SiteServices
from issuepress.site.source import ApiSource, SnapshotSource
from tests.helpers import OWNER, REPO, FixedClock, RecordingTransport, make_issue

if typ.TYPE_CHECKING:
    from issuepress.github.models import Issue


@pytest.fixture
def site_config() -> SiteConfig:
    """Return settings for the test repository with the default page size."""
    return SiteConfig(username=OWNER, repo_name=REPO, site_name="Octo Notes")


@pytest.fixture
def twenty_five_posts() -> list[Issue]:
    """Return 25 posts numbered 1..25; posts 4, 11 and 19 carry ``go``."""
    return [
        make_issue(number, labels=("go",) if number in {4, 11, 19} else ())
        for number in range(1, 26)
    ]


@pytest.fixture
def clock() -> FixedClock:
    """Return a controllable epoch-millisecond clock."""
    return FixedClock()


@pytest.fixture
def transport() -> RecordingTransport:
    """Return an empty mock GitHub transport; tests add routes."""
    return RecordingTransport()


@pytest.fixture
def github_client(transport: RecordingTransport) -> GitHubRestClient:
    """Return a GitHub client whose requests go to the mock transport."""
    return GitHubRestClient(http_client=transport.client())


@pytest.fixture
def fetcher(github_client: GitHubRestClient, clock: FixedClock) -> CachedFetcher:
    """Return a cached fetcher over an in-memory store."""
    return CachedFetcher(github_client.get_json, MemoryResponseCache(), clock=clock)


@pytest.fixture
def api_services(
    github_client: GitHubRestClient, fetcher: CachedFetcher
) -> SiteServices:
    """Return services reading posts from the mocked GitHub API."""
    return SiteServices(
        source=ApiSource(github_client, fetcher),
        client=github_client,
        fetcher=fetcher,
    )


@pytest.fixture
def snapshot_services(
    github_client: GitHubRestClient,
    fetcher: CachedFetcher,
    twenty_five_posts: list[Issue],
) -> SiteServices:
    """Return services reading posts from a 25-post snapshot."""
    return SiteServices(
        source=SnapshotSource(twenty_five_posts),
        client=github_client,
        fetcher=fetcher,
    )

