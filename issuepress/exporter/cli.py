"""Command-line entry point exporting GitHub issues into ``db.json``."""

from __future__ import annotations

import argparse
import asyncio
from pathlib import Path

import msgspec

from issuepress.github.client import GitHubRestClient, GitHubRestConfig
from issuepress.github.errors import (
    GitHubAPIError,
    GitHubResponseShapeError,
    NetworkError,
)
from issuepress.logging import (
    configure_logging,
    get_logger,
    log_error,
    log_info,
    log_warning,
)
from issuepress.site.errors import ConfigReadError

from .service import export_snapshot

logger = get_logger(__name__)

DEFAULT_SETTING_PATH = Path("setting.json")
DEFAULT_OUTPUT_PATH = Path("db.json")

_FATAL_ERRORS = (
    ConfigReadError,
    GitHubAPIError,
    GitHubResponseShapeError,
    NetworkError,
    msgspec.ValidationError,
    OSError,
)


class ExportSettings(msgspec.Struct, kw_only=True, frozen=True):
    """The repository coordinates the exporter needs from ``setting.json``."""

    username: str
    repo_name: str


def read_export_settings(path: Path) -> ExportSettings:
    """Read the repository coordinates from a settings file.

    Raises
    ------
    ConfigReadError
        If the file is unreadable, is not JSON, or lacks a non-empty
        ``username`` or ``repo_name``.

    """
    try:
        settings = msgspec.json.decode(path.read_bytes(), type=ExportSettings)
    except (OSError, msgspec.DecodeError) as exc:
        raise ConfigReadError.unreadable(path, exc) from exc
    for field in ("username", "repo_name"):
        if not getattr(settings, field).strip():
            raise ConfigReadError.missing_field(path, field)
    return settings


async def _run(args: argparse.Namespace) -> int:
    settings = read_export_settings(args.setting)
    client = GitHubRestClient(GitHubRestConfig.from_env())
    try:
        count = await export_snapshot(
            client,
            settings.username,
            settings.repo_name,
            args.output,
            raw=args.raw,
        )
    finally:
        await client.aclose()
    log_info(logger, "Exported %d posts to %s", count, args.output)
    return count


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="issuepress-export",
        description="Export a repository's open issues into a JSON snapshot.",
    )
    parser.add_argument(
        "--setting",
        type=Path,
        default=DEFAULT_SETTING_PATH,
        help="Settings file providing username and repo_name (default: %(default)s)",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=DEFAULT_OUTPUT_PATH,
        help="Snapshot file to write (default: %(default)s)",
    )
    parser.add_argument(
        "--raw",
        action="store_true",
        help="Keep full GitHub records instead of the reduced field set",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="femtologging level name (default: %(default)s)",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """Export issues to a snapshot file.

    Parameters
    ----------
    argv : list[str] | None, optional
        Command-line arguments. ``None`` defaults to ``sys.argv``.

    Returns
    -------
    int
        Exit code: 0 on success, 1 when reading settings, fetching or
        writing fails. No snapshot is written on failure.

    """
    args = _build_parser().parse_args(argv)
    normalized_level, invalid_level = configure_logging(args.log_level)
    if invalid_level:
        log_warning(
            logger,
            "Invalid log level %r, falling back to %s",
            args.log_level,
            normalized_level,
        )

    try:
        asyncio.run(_run(args))
    except _FATAL_ERRORS as exc:
        log_error(logger, "Export failed: %s", exc)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
