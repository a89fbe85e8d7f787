"""Unit tests for the Falcon application and its resources."""

from __future__ import annotations

import typing as typ
from http import HTTPStatus

import falcon
import falcon.asgi
import falcon.testing
import pytest
from bs4 import BeautifulSoup

from issuepress.api import AppDependencies, create_app
from issuepress.api.middleware import ClientLifespan
from issuepress.api.pages.resources import first_values
from tests.helpers import write_json

if typ.TYPE_CHECKING:
    from pathlib import Path

    from issuepress.site.pages import SiteServices


@pytest.fixture
def site_root(tmp_path: Path) -> Path:
    """Return a site root with settings and a static asset."""
    write_json(
        tmp_path / "data" / "setting.json",
        {"site_name": "Octo Notes", "per_page": 5},
    )
    assets = tmp_path / "assets" / "css"
    assets.mkdir(parents=True)
    (assets / "style.css").write_text("body { margin: 0; }", encoding="utf-8")
    return tmp_path


@pytest.fixture
def client(
    site_root: Path, snapshot_services: SiteServices
) -> falcon.testing.TestClient:
    """Create a test client over a snapshot-backed app."""
    app = create_app(AppDependencies(site_root=site_root, services=snapshot_services))
    return falcon.testing.TestClient(app)


def test_create_app_returns_falcon_app(
    site_root: Path, snapshot_services: SiteServices
) -> None:
    """create_app returns a Falcon ASGI App instance."""
    app = create_app(AppDependencies(site_root=site_root, services=snapshot_services))

    assert isinstance(app, falcon.asgi.App)


@pytest.mark.parametrize(
    ("path", "expected"), [("/health", {"status": "ok"}), ("/ready", {"status": "ready"})]
)
def test_probes(client: falcon.testing.TestClient, path: str, expected: dict) -> None:
    """Probes answer 200 with their JSON status."""
    result = client.simulate_get(path)

    assert result.status_code == HTTPStatus.OK
    assert result.json == expected
    assert result.headers.get("content-type", "").startswith("application/json")


@pytest.mark.parametrize("path", ["/", "/index.html"])
def test_index_routes_render_post_list(
    client: falcon.testing.TestClient, path: str
) -> None:
    """Both index routes serve the list page using the site settings."""
    result = client.simulate_get(path, params={"page": "2"})

    assert result.status_code == HTTPStatus.OK
    assert result.headers["content-type"].startswith("text/html")
    soup = BeautifulSoup(result.text, "html.parser")
    assert soup.title.string == "Octo Notes"
    numbers = [a["href"] for a in soup.select("#post-list .post-title a")]
    assert numbers == [f"post.html?id={n}" for n in range(6, 11)]
    assert "Page 2 of 5" in soup.select_one(".pagination").get_text()


def test_post_route_uses_first_id(client: falcon.testing.TestClient) -> None:
    """Repeated ``id`` parameters use the first value."""
    result = client.simulate_get("/post.html", query_string="id=3&id=4")

    soup = BeautifulSoup(result.text, "html.parser")
    assert soup.select_one("#post-detail h1").string == "Post 3"


def test_post_route_error_is_still_200(client: falcon.testing.TestClient) -> None:
    """A missing post renders inline with HTTP 200."""
    result = client.simulate_get("/post.html")

    assert result.status_code == HTTPStatus.OK
    assert "Failed to load: no post id specified" in result.text


def test_site_root_template_override(
    site_root: Path, client: falcon.testing.TestClient
) -> None:
    """A template in the site root replaces the packaged one."""
    (site_root / "projects.html").write_text(
        "<html><head><title>Mine</title></head>"
        "<body><div id='project-list'></div></body></html>",
        encoding="utf-8",
    )

    result = client.simulate_get("/projects.html")

    soup = BeautifulSoup(result.text, "html.parser")
    assert soup.find(id="project-list").get_text(strip=True) == "No projects yet"


def test_static_assets_are_served(client: falcon.testing.TestClient) -> None:
    """Files under ``assets/`` are served when the directory exists."""
    result = client.simulate_get("/assets/css/style.css")

    assert result.status_code == HTTPStatus.OK
    assert result.text == "body { margin: 0; }"


def test_static_routes_skipped_when_missing(
    tmp_path: Path, snapshot_services: SiteServices
) -> None:
    """Without ``data/`` or ``assets/`` no static route is registered."""
    app = create_app(AppDependencies(site_root=tmp_path, services=snapshot_services))
    client = falcon.testing.TestClient(app)

    assert client.simulate_get("/assets/x.css").status_code == HTTPStatus.NOT_FOUND
    assert client.simulate_get("/").status_code == HTTPStatus.OK


def test_first_values_collapses_lists() -> None:
    """Only the first value of repeated parameters is kept."""
    assert first_values({"id": ["3", "4"], "label": "go", "empty": []}) == {
        "id": "3",
        "label": "go",
    }


class _ClosingClient:
    def __init__(self) -> None:
        self.closed = 0

    async def aclose(self) -> None:
        self.closed += 1


@pytest.mark.asyncio
async def test_lifespan_shutdown_closes_client() -> None:
    """The GitHub client is closed on ASGI shutdown."""
    github = _ClosingClient()
    middleware = ClientLifespan(github)  # type: ignore[arg-type]

    await middleware.process_shutdown({}, {"type": "lifespan.shutdown"})

    assert github.closed == 1
