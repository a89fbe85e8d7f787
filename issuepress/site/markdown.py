"""Markdown helpers for post bodies and page metadata."""

from __future__ import annotations

import datetime as dt
import functools
import re

from markdown_it import MarkdownIt

_SUMMARY_PATTERNS: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"`{3}[\s\S]*?`{3}"), ""),
    (re.compile(r"!\[.*?\]\(.*?\)"), ""),
    (re.compile(r"\[(.*?)\]\(.*?\)"), r"\1"),
    (re.compile(r"#{1,6}\s"), ""),
    (re.compile(r"(\*\*|__)(.*?)\1"), r"\2"),
    (re.compile(r"(\*|_)(.*?)\1"), r"\2"),
    (re.compile(r"`(.+?)`"), r"\1"),
    (re.compile(r"\s*\n\s*"), " "),
)


@functools.cache
def _parser() -> MarkdownIt:
    # Issue bodies are GitHub-flavoured: tables, strikethrough and inline HTML.
    return MarkdownIt("commonmark", {"html": True}).enable(["table", "strikethrough"])


def render_markdown(text: str | None) -> str:
    """Render Markdown to an HTML fragment; ``None`` renders as empty."""
    if not text:
        return ""
    return _parser().render(text)


def summarize_markdown(text: str | None, length: int = 150) -> str:
    """Strip Markdown syntax and truncate to ``length`` characters.

    Code fences and images are dropped, links keep their text and emphasis
    markers are removed. Truncated summaries end with ``...``.

    Examples
    --------
    >>> summarize_markdown("# Hello **world**")
    'Hello world'

    """
    if not text:
        return ""
    summary = text
    for pattern, replacement in _SUMMARY_PATTERNS:
        summary = pattern.sub(replacement, summary)
    summary = summary.strip()
    if len(summary) > length:
        return f"{summary[:length]}..."
    return summary


def format_date(value: str) -> str:
    """Format a GitHub ISO 8601 timestamp as a UTC ``YYYY-MM-DD`` date."""
    parsed = dt.datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(dt.UTC)
    return parsed.strftime("%Y-%m-%d")
