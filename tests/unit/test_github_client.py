"""Unit tests for the GitHub REST client."""

from __future__ import annotations

import secrets

import httpx
import pytest

from issuepress.github.client import TOKEN_ENV_VAR, GitHubRestClient, GitHubRestConfig
from issuepress.github.errors import (
    GitHubResponseShapeError,
    HttpStatusError,
    NetworkError,
    RateLimitError,
)
from tests.helpers import API_BASE, OWNER, REPO, RecordingTransport, raw_issue

_TOKEN = secrets.token_hex(8)


def test_issues_url_orders_creator_state_paging_and_labels() -> None:
    """The list URL carries the creator, state, paging and label filters."""
    client = GitHubRestClient()

    url = client.issues_url(
        OWNER, REPO, page=2, per_page=10, labels="go", creator=OWNER
    )

    assert url == (
        f"{API_BASE}/repos/{OWNER}/{REPO}/issues"
        f"?creator={OWNER}&state=open&per_page=10&page=2&labels=go"
    )


def test_issues_url_omits_unset_filters() -> None:
    """Without creator or labels only state and paging are sent."""
    client = GitHubRestClient()

    url = client.issues_url(OWNER, REPO, page=1, per_page=100)

    assert url == f"{API_BASE}/repos/{OWNER}/{REPO}/issues?state=open&per_page=100&page=1"


def test_single_resource_urls() -> None:
    """Issue and user URLs follow the REST layout."""
    client = GitHubRestClient(GitHubRestConfig(api_base_url="https://ghe.test/api/v3"))

    assert client.issue_url(OWNER, REPO, 7) == (
        f"https://ghe.test/api/v3/repos/{OWNER}/{REPO}/issues/7"
    )
    assert client.user_url(OWNER) == f"https://ghe.test/api/v3/users/{OWNER}"


@pytest.mark.asyncio
async def test_get_json_returns_decoded_body(transport: RecordingTransport) -> None:
    """A 2xx response body is decoded and returned."""
    url = f"{API_BASE}/repos/{OWNER}/{REPO}/issues/3"
    transport.routes[url] = (200, raw_issue(3))
    client = GitHubRestClient(http_client=transport.client())

    payload = await client.get_json(url)

    assert payload["number"] == 3
    assert transport.urls == [url]


@pytest.mark.asyncio
async def test_get_json_raises_rate_limit_error_on_403(
    transport: RecordingTransport,
) -> None:
    """HTTP 403 surfaces as RateLimitError."""
    url = f"{API_BASE}/users/{OWNER}"
    transport.routes[url] = (403, {"message": "API rate limit exceeded"})
    client = GitHubRestClient(http_client=transport.client())

    with pytest.raises(RateLimitError, match="rate limit exceeded"):
        await client.get_json(url)


@pytest.mark.asyncio
async def test_get_json_raises_http_status_error(transport: RecordingTransport) -> None:
    """Other statuses surface as HttpStatusError carrying the code."""
    client = GitHubRestClient(http_client=transport.client())

    with pytest.raises(HttpStatusError) as excinfo:
        await client.get_json(f"{API_BASE}/users/ghost")

    assert excinfo.value.status_code == 404


@pytest.mark.asyncio
async def test_get_json_wraps_transport_failures() -> None:
    """Transport errors become NetworkError chained from the httpx error."""

    def _refuse(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    http_client = httpx.AsyncClient(transport=httpx.MockTransport(_refuse))
    client = GitHubRestClient(http_client=http_client)

    with pytest.raises(NetworkError) as excinfo:
        await client.get_json(f"{API_BASE}/users/{OWNER}")

    assert isinstance(excinfo.value.__cause__, httpx.ConnectError)


@pytest.mark.asyncio
async def test_get_json_wraps_redirect_loops() -> None:
    """Protocol-level httpx failures also become NetworkError."""

    def _loop(request: httpx.Request) -> httpx.Response:
        raise httpx.TooManyRedirects("redirect loop", request=request)

    http_client = httpx.AsyncClient(transport=httpx.MockTransport(_loop))
    client = GitHubRestClient(http_client=http_client)

    with pytest.raises(NetworkError) as excinfo:
        await client.get_json(f"{API_BASE}/users/{OWNER}")

    assert isinstance(excinfo.value.__cause__, httpx.TooManyRedirects)


@pytest.mark.asyncio
async def test_get_json_rejects_non_json_body() -> None:
    """A successful response that is not JSON raises a shape error."""

    def _html(request: httpx.Request) -> httpx.Response:
        del request
        return httpx.Response(200, text="<html>maintenance</html>")

    http_client = httpx.AsyncClient(transport=httpx.MockTransport(_html))
    client = GitHubRestClient(http_client=http_client)

    with pytest.raises(GitHubResponseShapeError, match="is not JSON"):
        await client.get_json(f"{API_BASE}/users/{OWNER}")


@pytest.mark.asyncio
async def test_token_is_sent_with_token_scheme() -> None:
    """A configured token is sent as ``Authorization: token <t>``."""
    seen: list[httpx.Request] = []

    def _handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=[])

    http_client = httpx.AsyncClient(transport=httpx.MockTransport(_handler))
    client = GitHubRestClient(GitHubRestConfig(token=_TOKEN), http_client=http_client)

    await client.get_json(f"{API_BASE}/repos/{OWNER}/{REPO}/issues")
    await http_client.aclose()

    assert seen[0].headers["Authorization"] == f"token {_TOKEN}"
    assert seen[0].headers["User-Agent"] == "issuepress/0.1"


@pytest.mark.asyncio
async def test_aclose_leaves_injected_client_open(
    transport: RecordingTransport,
) -> None:
    """Closing the wrapper does not close a caller-owned httpx client."""
    http_client = transport.client()
    client = GitHubRestClient(http_client=http_client)

    await client.aclose()

    assert not http_client.is_closed
    await http_client.aclose()


def test_config_from_env_reads_token(monkeypatch: pytest.MonkeyPatch) -> None:
    """from_env picks up and trims the token."""
    monkeypatch.setenv(TOKEN_ENV_VAR, f"  {_TOKEN}\n")

    assert GitHubRestConfig.from_env().token == _TOKEN


def test_config_from_env_without_token(monkeypatch: pytest.MonkeyPatch) -> None:
    """A missing or blank token yields anonymous configuration."""
    monkeypatch.setenv(TOKEN_ENV_VAR, "   ")

    assert GitHubRestConfig.from_env().token is None
