"""Shared test utilities and GitHub payload builders."""

from __future__ import annotations

import asyncio
import typing as typ

import httpx
import msgspec

from issuepress.github.models import Issue

if typ.TYPE_CHECKING:
    from pathlib import Path

OWNER = "octocat"
REPO = "Hello-World"
API_BASE = "https://api.github.com"

T = typ.TypeVar("T")


def run_async(coro_func: typ.Callable[[], typ.Coroutine[typ.Any, typ.Any, T]]) -> T:
    """Execute an async callable within the test context."""
    return asyncio.run(coro_func())


def raw_issue(
    number: int,
    *,
    labels: typ.Sequence[str] = (),
    pull_request: bool = False,
    body: str | None = "",
    title: str | None = None,
) -> dict[str, typ.Any]:
    """Return an issue payload shaped like the GitHub REST response.

    An empty ``body`` selects a generated Markdown body; ``None`` mimics an
    issue created without one.
    """
    day = (number % 28) + 1
    timestamp = f"2024-02-{day:02d}T08:30:00Z"
    record: dict[str, typ.Any] = {
        "id": 1_000_000 + number,
        "node_id": f"I_kw{number}",
        "number": number,
        "title": title or f"Post {number}",
        "body": body if body != "" else f"Body of **post {number}**.",
        "state": "open",
        "comments": 0,
        "created_at": timestamp,
        "updated_at": timestamp,
        "html_url": f"https://github.com/{OWNER}/{REPO}/issues/{number}",
        "labels": [
            {"id": 500 + index, "name": name, "color": "ededed", "default": False}
            for index, name in enumerate(labels)
        ],
        "user": {
            "login": OWNER,
            "id": 583231,
            "avatar_url": "https://avatars.githubusercontent.com/u/583231",
            "html_url": f"https://github.com/{OWNER}",
            "type": "User",
        },
    }
    if pull_request:
        record["pull_request"] = {
            "url": f"{API_BASE}/repos/{OWNER}/{REPO}/pulls/{number}",
        }
    return record


def make_issue(number: int, **kwargs: typ.Any) -> Issue:  # noqa: ANN401
    """Return a decoded :class:`Issue` built from :func:`raw_issue`."""
    return msgspec.convert(raw_issue(number, **kwargs), type=Issue)


def raw_user(**overrides: typ.Any) -> dict[str, typ.Any]:  # noqa: ANN401
    """Return a user profile payload shaped like ``GET /users/{username}``."""
    profile: dict[str, typ.Any] = {
        "login": OWNER,
        "id": 583231,
        "name": "The Octocat",
        "avatar_url": "https://avatars.githubusercontent.com/u/583231",
        "html_url": f"https://github.com/{OWNER}",
        "bio": "Mascot of GitHub",
        "location": "San Francisco",
        "blog": "https://github.blog",
        "public_repos": 8,
        "followers": 9000,
        "following": 9,
    }
    profile.update(overrides)
    return profile


class RecordingTransport:
    """Route mock HTTP requests by URL and record every request made.

    Parameters
    ----------
    routes
        Maps a full request URL to ``(status, json_payload)``. Unknown URLs
        answer 404.

    """

    def __init__(self, routes: dict[str, tuple[int, typ.Any]] | None = None) -> None:
        """Initialise with an optional route table."""
        self.routes: dict[str, tuple[int, typ.Any]] = dict(routes or {})
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        """Answer ``request`` from the route table."""
        self.requests.append(request)
        status, payload = self.routes.get(str(request.url), (404, {"message": "Not Found"}))
        return httpx.Response(status_code=status, json=payload)

    @property
    def urls(self) -> list[str]:
        """Return the URLs requested so far, in order."""
        return [str(request.url) for request in self.requests]

    def client(self) -> httpx.AsyncClient:
        """Return an ``httpx.AsyncClient`` backed by this transport."""
        return httpx.AsyncClient(transport=httpx.MockTransport(self))


class FixedClock:
    """Epoch-millisecond clock advanced explicitly by tests."""

    def __init__(self, now_ms: int = 1_700_000_000_000) -> None:
        """Start the clock at ``now_ms``."""
        self.now_ms = now_ms

    def __call__(self) -> int:
        """Return the current fake time."""
        return self.now_ms

    def advance(self, ms: int) -> None:
        """Move the clock forward by ``ms`` milliseconds."""
        self.now_ms += ms


def write_json(path: Path, payload: object) -> Path:
    """Write ``payload`` as JSON to ``path``, creating parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(msgspec.json.encode(payload))
    return path
