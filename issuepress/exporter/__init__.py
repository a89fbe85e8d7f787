"""Build-time export of GitHub issues into a local snapshot."""

from __future__ import annotations

from .service import (
    EXPORT_PAGE_SIZE,
    export_snapshot,
    fetch_all_issues,
    simplify_issues,
    write_snapshot,
)

__all__ = [
    "EXPORT_PAGE_SIZE",
    "export_snapshot",
    "fetch_all_issues",
    "simplify_issues",
    "write_snapshot",
]
