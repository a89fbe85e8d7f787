"""Behavioural coverage for the issuepress HTTP service."""

from __future__ import annotations

import typing as typ

import falcon.testing
import pytest
from bs4 import BeautifulSoup
from pytest_bdd import given, parsers, scenario, then, when

from issuepress.api import AppDependencies, create_app
from issuepress.github.cache import CachedFetcher, MemoryResponseCache
from issuepress.github.client import GitHubRestClient
from issuepress.site.pages import SiteServices
from issuepress.site.source import SnapshotSource
from tests.helpers import RecordingTransport, make_issue

if typ.TYPE_CHECKING:
    from pathlib import Path

    from falcon.testing.client import Result


class ServiceContext(typ.TypedDict, total=False):
    """Shared mutable scenario state."""

    client: falcon.testing.TestClient
    response: Result


@scenario("../site_service.feature", "Health endpoint returns ok status")
def test_health_endpoint_returns_ok() -> None:
    """Wrap the pytest-bdd scenario for the health endpoint."""


@scenario("../site_service.feature", "Ready endpoint returns ready status")
def test_ready_endpoint_returns_ready() -> None:
    """Wrap the pytest-bdd scenario for the ready endpoint."""


@scenario("../site_service.feature", "Post list page renders summaries")
def test_post_list_page_renders() -> None:
    """Wrap the pytest-bdd scenario for the list page."""


@scenario("../site_service.feature", "A missing post renders an inline error")
def test_missing_post_renders_inline_error() -> None:
    """Wrap the pytest-bdd scenario for inline errors."""


@pytest.fixture
def service_context() -> ServiceContext:
    """Provide empty scenario state."""
    return {}


@given(parsers.parse("a running issuepress app backed by a {count:d} post snapshot"))
def given_running_app(
    service_context: ServiceContext, tmp_path: Path, count: int
) -> None:
    """Build the app over an in-memory snapshot."""
    github = GitHubRestClient(http_client=RecordingTransport().client())
    fetcher = CachedFetcher(github.get_json, MemoryResponseCache())
    services = SiteServices(
        source=SnapshotSource([make_issue(n) for n in range(1, count + 1)]),
        client=github,
        fetcher=fetcher,
    )
    app = create_app(AppDependencies(site_root=tmp_path, services=services))
    service_context["client"] = falcon.testing.TestClient(app)


@when(parsers.parse("I request GET {target}"))
def when_request_get(service_context: ServiceContext, target: str) -> None:
    """Issue a GET request, splitting off any query string."""
    path, _, query = target.partition("?")
    client = service_context["client"]
    service_context["response"] = client.simulate_get(path, query_string=query or None)


@then(parsers.parse("the response status is {status:d}"))
def then_response_status(service_context: ServiceContext, status: int) -> None:
    """Assert the HTTP response status code."""
    response = service_context["response"]
    assert response.status_code == status, (
        f"expected status {status}, got {response.status_code}"
    )


@then(parsers.parse('the response body is {{"status": "{expected_status}"}}'))
def then_response_body_status(
    service_context: ServiceContext, expected_status: str
) -> None:
    """Assert the response JSON body carries the expected status."""
    assert service_context["response"].json == {"status": expected_status}


@then(parsers.parse("the page lists {count:d} posts"))
def then_page_lists(service_context: ServiceContext, count: int) -> None:
    """Assert the number of rendered post summaries."""
    soup = BeautifulSoup(service_context["response"].text, "html.parser")
    assert len(soup.select("#post-list li.post-item")) == count


@then(parsers.parse('the page shows the error "{message}"'))
def then_page_shows_error(service_context: ServiceContext, message: str) -> None:
    """Assert the inline error text."""
    soup = BeautifulSoup(service_context["response"].text, "html.parser")
    error = soup.select_one("div.error")
    assert error is not None
    assert error.get_text() == message
