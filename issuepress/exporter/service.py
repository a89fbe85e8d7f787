"""Export a repository's open issues into a local JSON snapshot.

Pages are requested strictly one after another. The snapshot is written
only once every page has been fetched, through a temporary sibling file,
so a failed run never leaves a partial or truncated ``db.json`` behind.

Usage
-----
>>> import asyncio
>>> from pathlib import Path
>>> from issuepress.github.client import GitHubRestClient
>>> from issuepress.exporter.service import export_snapshot
>>>
>>> client = GitHubRestClient()
>>> count = asyncio.run(export_snapshot(client, "octocat", "Hello-World", Path("db.json")))

"""

from __future__ import annotations

import asyncio
import typing as typ

import msgspec

from issuepress.github.errors import GitHubResponseShapeError
from issuepress.github.models import SnapshotIssue, is_pull_request
from issuepress.logging import get_logger, log_info

if typ.TYPE_CHECKING:
    from pathlib import Path

    from issuepress.github.client import GitHubRestClient

logger = get_logger(__name__)

EXPORT_PAGE_SIZE = 100

RawIssue = dict[str, typ.Any]


async def fetch_all_issues(
    client: GitHubRestClient, owner: str, repo: str
) -> list[RawIssue]:
    """Return every open issue of ``owner/repo`` except pull requests.

    Paging stops after an empty page or a page shorter than
    :data:`EXPORT_PAGE_SIZE`. Any error propagates and discards the pages
    already fetched.
    """
    issues: list[RawIssue] = []
    page = 1
    log_info(logger, "Fetching issues for %s/%s", owner, repo)
    while True:
        url = client.issues_url(owner, repo, page=page, per_page=EXPORT_PAGE_SIZE)
        batch = await client.get_json(url)
        if not isinstance(batch, list):
            raise GitHubResponseShapeError.expected("a list of issues", url)
        log_info(logger, "Page %d returned %d items", page, len(batch))
        if not batch:
            break
        issues.extend(item for item in batch if not is_pull_request(item))
        if len(batch) < EXPORT_PAGE_SIZE:
            break
        page += 1
    log_info(logger, "Fetched %d issues in total", len(issues))
    return issues


def simplify_issues(issues: typ.Iterable[RawIssue]) -> list[RawIssue]:
    """Project raw issues onto the fields kept in a snapshot."""
    return msgspec.to_builtins(msgspec.convert(list(issues), type=list[SnapshotIssue]))


def _replace_file(path: Path, payload: bytes) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_name(f"{path.name}.tmp")
    try:
        tmp_path.write_bytes(payload)
        tmp_path.replace(path)
    except OSError:
        tmp_path.unlink(missing_ok=True)
        raise


async def write_snapshot(path: Path, issues: list[RawIssue]) -> None:
    """Write ``issues`` to ``path`` as JSON indented by two spaces."""
    payload = msgspec.json.format(msgspec.json.encode(issues), indent=2)
    await asyncio.to_thread(_replace_file, path, payload + b"\n")
    log_info(logger, "Snapshot saved to %s", path)


async def export_snapshot(
    client: GitHubRestClient,
    owner: str,
    repo: str,
    output: Path,
    *,
    raw: bool = False,
) -> int:
    """Fetch, optionally simplify, and write the snapshot; return its size."""
    issues = await fetch_all_issues(client, owner, repo)
    records = issues if raw else simplify_issues(issues)
    await write_snapshot(output, records)
    return len(records)
