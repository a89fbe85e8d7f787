"""HTML fragment renderers for the blog pages.

Each function returns a fragment that :mod:`issuepress.site.pages` inserts
into a fixed container of a page template. Every value that originates from
GitHub or from ``setting.json`` is HTML-escaped; Markdown bodies arrive
already rendered.
"""

from __future__ import annotations

import dataclasses as dc
import re
import typing as typ
from html import escape
from urllib.parse import quote, urlencode

from .markdown import format_date, summarize_markdown
from .source import ExactPages

if typ.TYPE_CHECKING:
    from issuepress.github.models import GitHubUser, Issue

    from .config import Account, NavLabel, Project, SiteConfig
    from .source import Pagination

DEFAULT_SITE_NAME = "My Blog"
DEFAULT_SHARE_IMAGE = "assets/images/banner.jpg"
FALLBACK_ACCOUNT_LOGO = "https://github.githubassets.com/favicons/favicon.png"

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def _attr(value: object) -> str:
    return escape(str(value), quote=True)


def loading_fragment() -> str:
    """Return the placeholder shown while a container has no content yet."""
    return '<div class="loading">Loading...</div>'


def empty_fragment(message: str) -> str:
    """Return the placeholder for a container with nothing to show."""
    return f'<div class="loading">{escape(message)}</div>'


def error_fragment(exc: BaseException) -> str:
    """Return the inline message that replaces a container after a failure."""
    return f'<div class="error">Failed to load: {escape(str(exc))}</div>'


def site_title_fragment(config: SiteConfig) -> str:
    """Return the site title link, with the logo when one is configured."""
    name = escape(config.site_name or DEFAULT_SITE_NAME)
    if config.site_logo:
        return (
            '<a href="index.html" class="site-branding">'
            f'<img src="{_attr(config.site_logo)}" alt="{name}" class="site-logo">'
            f"<span>{name}</span>"
            "</a>"
        )
    return f'<a href="index.html">{name}</a>'


def _nav_link(href: str, text: str, *, active: bool) -> str:
    active_attr = ' class="active"' if active else ""
    return f'<a href="{_attr(href)}"{active_attr}>{escape(text)}</a>'


def nav_fragment(
    labels: typ.Sequence[NavLabel],
    *,
    page_name: str,
    current_label: str | None,
) -> str:
    """Return the navigation bar: fixed pages followed by label filters.

    Home is active on the list page when no label is selected; a label
    entry is active when it matches the ``label`` query parameter.
    """
    links = [
        _nav_link(
            "index.html",
            "Home",
            active=page_name == "index.html" and not current_label,
        ),
        _nav_link("projects.html", "Projects", active=page_name == "projects.html"),
        _nav_link("about.html", "About", active=page_name == "about.html"),
    ]
    links.extend(
        _nav_link(
            f"index.html?{urlencode({'label': label.name})}",
            label.name,
            active=current_label == label.name,
        )
        for label in labels
    )
    return "".join(links)


def copyright_years(start_time: str | int | None, current_year: int) -> str:
    """Return ``"start-current"`` when ``start_time`` precedes the current year.

    Only a leading integer in ``start_time`` is considered, so values such
    as ``"2019-05-01"`` yield 2019.

    Examples
    --------
    >>> copyright_years("2019-05-01", 2024)
    '2019-2024'
    >>> copyright_years(None, 2024)
    '2024'

    """
    if start_time is None:
        return str(current_year)
    match = _LEADING_INT.match(str(start_time))
    if match is None:
        return str(current_year)
    start_year = int(match.group(1))
    if start_year < current_year:
        return f"{start_year}-{current_year}"
    return str(current_year)


def _account_link(account: Account) -> str:
    name = _attr(account.name)
    logo = _attr(account.site_logo or FALLBACK_ACCOUNT_LOGO)
    return (
        f'<a href="{_attr(account.site_url)}" target="_blank" rel="noopener" '
        f'class="account-link" title="{name}">'
        f'<img src="{logo}" alt="{name}" '
        f"onerror=\"this.src='{FALLBACK_ACCOUNT_LOGO}'\">"
        f"<span>{escape(account.name)}</span>"
        "</a>"
    )


def footer_fragment(config: SiteConfig, *, current_year: int) -> str:
    """Return the footer: contact accounts and the copyright line."""
    parts: list[str] = []
    if config.accounts:
        accounts = "".join(_account_link(account) for account in config.accounts)
        parts.append(
            '<div class="footer-section">'
            '<h3 class="section-title">Contact</h3>'
            f'<div class="account-list">{accounts}</div>'
            "</div>"
        )
    years = copyright_years(config.start_time, current_year)
    owner = escape(config.username or DEFAULT_SITE_NAME)
    parts.append(
        '<div class="copyright">'
        '<span class="status-indicator"></span>'
        f"System online &bull; &copy; {years} {owner}"
        "</div>"
    )
    return "".join(parts)


def _post_item(post: Issue) -> str:
    tags = "".join(
        f'<span class="post-tag">#{escape(label.name)}</span>' for label in post.labels
    )
    return (
        '<li class="post-item">'
        '<div class="post-header-flex">'
        '<h2 class="post-title">'
        f'<a href="post.html?id={post.number}">{escape(post.title)}</a>'
        "</h2>"
        f'<div class="post-meta">{tags}<span>{format_date(post.created_at)}</span></div>'
        "</div>"
        "</li>"
    )


def post_list_fragment(posts: typ.Sequence[Issue]) -> str:
    """Return the list items for a page of post summaries."""
    return "".join(_post_item(post) for post in posts)


def should_paginate(page: int, pagination: Pagination) -> bool:
    """Return True when a pagination control is worth showing.

    A known single page never needs one. With an unknown page count the
    control is hidden only on a first page that is not full.
    """
    if isinstance(pagination, ExactPages):
        return pagination.total_pages > 1
    return pagination.has_more or page > 1


def _page_href(page: int, label: str | None) -> str:
    params: dict[str, str | int] = {"page": page}
    if label:
        params["label"] = label
    return f"index.html?{urlencode(params)}"


def _page_button(text: str, page: int, label: str | None, *, disabled: bool) -> str:
    if disabled:
        return (
            f'<span class="pagination-btn disabled" aria-disabled="true">{text}</span>'
        )
    return f'<a class="pagination-btn" href="{_attr(_page_href(page, label))}">{text}</a>'


def pagination_fragment(
    page: int, pagination: Pagination, *, label: str | None = None
) -> str | None:
    """Return the pagination control, or None when it should be hidden.

    With exact pagination the indicator reads "Page X of Y"; with an
    unknown page count only "Page X" is shown.
    """
    if not should_paginate(page, pagination):
        return None
    if isinstance(pagination, ExactPages):
        next_disabled = page >= pagination.total_pages
        info = f"Page {page} of {pagination.total_pages}"
    else:
        next_disabled = not pagination.has_more
        info = f"Page {page}"
    previous = _page_button("&larr; Previous", page - 1, label, disabled=page <= 1)
    following = _page_button("Next &rarr;", page + 1, label, disabled=next_disabled)
    return (
        '<div class="pagination">'
        f"{previous}"
        f'<div class="pagination-info">{info}</div>'
        f"{following}"
        "</div>"
    )


def share_links(url: str, title: str) -> dict[str, str]:
    """Return prebuilt share URLs for Twitter/X, Weibo and LinkedIn."""
    share_url = quote(url, safe="")
    share_title = quote(title, safe="")
    return {
        "twitter": f"https://twitter.com/intent/tweet?text={share_title}&url={share_url}",
        "weibo": (
            "https://service.weibo.com/share/share.php"
            f"?url={share_url}&title={share_title}"
        ),
        "linkedin": f"https://www.linkedin.com/sharing/share-offsite/?url={share_url}",
    }


_SHARE_TARGETS: tuple[tuple[str, str], ...] = (
    ("twitter", "Twitter"),
    ("weibo", "Weibo"),
    ("linkedin", "LinkedIn"),
)


def _share_section(url: str, title: str) -> str:
    links = share_links(url, title)
    buttons = "".join(
        f'<a href="{_attr(links[key])}" target="_blank" rel="noopener" '
        f'class="share-btn share-{key}" title="Share on {text}">{text}</a>'
        for key, text in _SHARE_TARGETS
    )
    copy_button = (
        '<button type="button" class="share-btn share-copy" title="Copy link" '
        "onclick=\"navigator.clipboard.writeText(window.location.href)"
        ".then(() => alert('Link copied!'))\">Copy link</button>"
    )
    return (
        '<div class="share-section">'
        "<h3>Share this post</h3>"
        f'<div class="share-buttons">{buttons}{copy_button}</div>'
        "</div>"
    )


def post_detail_fragment(post: Issue, *, body_html: str, page_url: str) -> str:
    """Return the post header, rendered body and share section."""
    author = ""
    if post.user is not None:
        author = (
            f'<span><a href="{_attr(post.html_url or "")}" target="_blank" '
            f'rel="noopener">{escape(post.user.login)}</a></span>'
        )
    return (
        '<div class="post-header">'
        f"<h1>{escape(post.title)}</h1>"
        '<div class="post-meta">'
        f"<span>Published {format_date(post.created_at)}</span>"
        f"{author}"
        "</div>"
        "</div>"
        f'<div class="markdown-body">{body_html}</div>'
        f"{_share_section(page_url, post.title)}"
    )


@dc.dataclass(frozen=True, slots=True)
class PageMeta:
    """Values written into the document title and SEO meta tags."""

    title: str
    description: str = ""
    keywords: str = ""
    image: str = ""


def post_meta(post: Issue, config: SiteConfig) -> PageMeta:
    """Build page metadata from a post's title, body and labels."""
    return PageMeta(
        title=f"{post.title} - {config.site_name or DEFAULT_SITE_NAME}",
        description=summarize_markdown(post.body),
        keywords=", ".join(label.name for label in post.labels),
        image=config.hero_image or DEFAULT_SHARE_IMAGE,
    )


def _project_card(project: Project) -> str:
    name = escape(project.name)
    cover = ""
    if project.cover:
        cover = (
            '<div class="project-cover">'
            f'<img src="{_attr(project.cover)}" alt="{name}" loading="lazy">'
            "</div>"
        )
    return (
        f'<a href="{_attr(project.site_url)}" target="_blank" rel="noopener" '
        'class="project-card">'
        f"{cover}"
        '<div class="project-content">'
        '<div class="project-header">'
        f'<h3 class="project-title">{name}</h3>'
        '<div class="project-arrow">&#8599;</div>'
        "</div>"
        f'<p class="project-desc">{escape(project.desc)}</p>'
        "</div>"
        "</a>"
    )


def project_list_fragment(projects: typ.Sequence[Project]) -> str:
    """Return one card per configured project."""
    return "".join(_project_card(project) for project in projects)


def about_fragment(user: GitHubUser, *, content_html: str) -> str:
    """Return the profile header, statistics and about text."""
    display_name = escape(user.name or user.login)
    meta = [
        f'<span><a href="{_attr(user.html_url or "")}" target="_blank" '
        f'rel="noopener">@{escape(user.login)}</a></span>'
    ]
    if user.location:
        meta.append(f"<span>&#128205; {escape(user.location)}</span>")
    if user.blog:
        meta.append(
            f'<span>&#128279; <a href="{_attr(user.blog)}" target="_blank" '
            f'rel="noopener">{escape(user.blog)}</a></span>'
        )
    return (
        '<div class="about-profile">'
        f'<img src="{_attr(user.avatar_url or "")}" alt="{display_name}" '
        'class="about-avatar">'
        f'<h2 class="about-name">{display_name}</h2>'
        f'<div class="about-meta">{"".join(meta)}</div>'
        '<div class="about-stats">'
        f'<div class="stat-item"><strong>{user.public_repos}</strong> Repos</div>'
        f'<div class="stat-item"><strong>{user.followers}</strong> Followers</div>'
        f'<div class="stat-item"><strong>{user.following}</strong> Following</div>'
        "</div>"
        "</div>"
        f'<div class="markdown-body about-body">{content_html}</div>'
    )


def bio_fragment(bio: str | None) -> str:
    """Return the GitHub bio paragraph used when no about text is configured."""
    if bio:
        return f'<p class="about-bio">{escape(bio)}</p>'
    return "<p>No introduction yet.</p>"
