"""Page composition: fill a template's fixed containers with rendered HTML.

Page templates expose fixed element ids. The shared chrome (``site-title``,
``site-slogan``, ``hero-section``, ``nav``, ``site-footer``) is filled when
site settings exist; then the first page container found decides which
render routine runs:

=================  =============================
Container id       Routine
=================  =============================
``post-list``      :func:`render_post_list`
``post-detail``    :func:`render_post_detail`
``project-list``   :func:`render_project_list`
``about-content``  :func:`render_about`
=================  =============================

Every routine catches failures at its own boundary and replaces its
container with an inline error, so a page is always produced.
"""

from __future__ import annotations

import collections.abc as cabc
import dataclasses as dc
import datetime as dt
import importlib.resources
import typing as typ

from bs4 import BeautifulSoup, Tag

from issuepress.logging import get_logger, log_exception

from . import render
from .config import SiteConfig
from .errors import InvalidParameterError, MissingParameterError
from .markdown import render_markdown
from .source import UnknownPages, fetch_user

if typ.TYPE_CHECKING:
    from pathlib import Path

    from issuepress.github.cache import CachedFetcher
    from issuepress.github.client import GitHubRestClient

    from .source import ApiSource, SnapshotSource

logger = get_logger(__name__)

PAGE_TEMPLATES = ("index.html", "post.html", "projects.html", "about.html")

_META_TARGETS: dict[str, tuple[tuple[str, str], ...]] = {
    "title": (("property", "og:title"), ("property", "twitter:title")),
    "description": (
        ("name", "description"),
        ("property", "og:description"),
        ("property", "twitter:description"),
    ),
    "keywords": (("name", "keywords"),),
    "image": (("property", "og:image"), ("property", "twitter:image")),
    "url": (("property", "og:url"), ("property", "twitter:url")),
}


@dc.dataclass(frozen=True, slots=True)
class SiteServices:
    """Collaborators resolved once when the application starts."""

    source: SnapshotSource | ApiSource
    client: GitHubRestClient
    fetcher: CachedFetcher


@dc.dataclass(frozen=True, slots=True)
class PageRequest:
    """Everything a render routine needs to know about one page view.

    Attributes
    ----------
    page_name
        Template file name, e.g. ``index.html``.
    url
        Full URL of the request, used for share links and ``og:url``.
    params
        Query parameters; only the first value of each is kept.
    settings
        Site settings, or None when no ``setting.json`` exists.
    today
        Date used for the footer copyright range.

    """

    page_name: str
    url: str
    params: cabc.Mapping[str, str] = dc.field(default_factory=dict)
    settings: SiteConfig | None = None
    today: dt.date = dc.field(default_factory=lambda: dt.datetime.now(dt.UTC).date())

    @property
    def config(self) -> SiteConfig:
        """Return the settings, falling back to the built-in defaults."""
        return self.settings or SiteConfig()

    @property
    def label(self) -> str | None:
        """Return the ``label`` filter, treating an empty value as absent."""
        return self.params.get("label") or None

    @property
    def page(self) -> int:
        """Return the requested list page; unusable values mean page 1."""
        try:
            return int(self.params.get("page", "1"))
        except ValueError:
            return 1

    def post_number(self) -> int:
        """Return the post number from the ``id`` parameter.

        Raises
        ------
        MissingParameterError
            If no ``id`` was given.
        InvalidParameterError
            If ``id`` is not an integer.

        """
        raw = self.params.get("id")
        if not raw:
            raise MissingParameterError("id")
        try:
            return int(raw)
        except ValueError as exc:
            raise InvalidParameterError("id", raw) from exc


def load_template(name: str, site_root: Path | None = None) -> str:
    """Return a page template, preferring a copy in ``site_root``."""
    if site_root is not None:
        override = site_root / name
        if override.is_file():
            return override.read_text(encoding="utf-8")
    resource = importlib.resources.files("issuepress.site") / "templates" / name
    return resource.read_text(encoding="utf-8")


def set_inner_html(element: Tag, html: str) -> None:
    """Replace the children of ``element`` with parsed ``html``."""
    element.clear()
    fragment = BeautifulSoup(html, "html.parser")
    for child in list(fragment.contents):
        element.append(child.extract())


def _insert_after(element: Tag, html: str) -> None:
    fragment = BeautifulSoup(html, "html.parser")
    anchor = element
    for child in list(fragment.contents):
        node = child.extract()
        anchor.insert_after(node)
        anchor = node


def _child_with_class(
    soup: BeautifulSoup, parent: Tag, tag_name: str, class_name: str, *, first: bool
) -> Tag:
    existing = parent.find(class_=class_name)
    if isinstance(existing, Tag):
        return existing
    created = soup.new_tag(tag_name, attrs={"class": class_name})
    if first:
        parent.insert(0, created)
    else:
        parent.append(created)
    return created


def set_document_title(soup: BeautifulSoup, title: str) -> None:
    """Set the ``<title>`` text, creating the element when missing."""
    if soup.title is not None:
        soup.title.string = title
        return
    head = soup.find("head")
    if isinstance(head, Tag):
        title_tag = soup.new_tag("title")
        title_tag.string = title
        head.append(title_tag)


def update_page_seo(soup: BeautifulSoup, meta: render.PageMeta, url: str) -> None:
    """Write the document title and the matching SEO meta tags.

    Empty values leave the existing tags untouched; the URL tags always
    receive the current page URL.
    """
    values = {
        "title": meta.title,
        "description": meta.description,
        "keywords": meta.keywords,
        "image": meta.image,
        "url": url,
    }
    if meta.title:
        set_document_title(soup, meta.title)
    for key, value in values.items():
        if not value:
            continue
        for attr, name in _META_TARGETS[key]:
            tag = soup.find("meta", attrs={attr: name})
            if isinstance(tag, Tag):
                tag["content"] = value


def add_code_copy_buttons(soup: BeautifulSoup) -> None:
    """Wrap every ``<pre>`` in ``div.code-wrapper`` with a copy button."""
    for pre in soup.find_all("pre"):
        parent = pre.parent
        if isinstance(parent, Tag) and "code-wrapper" in (parent.get("class") or []):
            continue
        wrapper = pre.wrap(soup.new_tag("div", attrs={"class": "code-wrapper"}))
        button = soup.new_tag("button", attrs={"class": "code-copy-btn", "type": "button"})
        button.string = "Copy"
        wrapper.append(button)


def _set_hero_slogan(soup: BeautifulSoup, text: str) -> None:
    hero = soup.find(id="hero-section")
    if isinstance(hero, Tag):
        slogan = _child_with_class(soup, hero, "div", "hero-slogan", first=False)
        slogan.string = text


def render_header(soup: BeautifulSoup, request: PageRequest) -> None:
    """Fill the site title, slogan, hero section and navigation bar."""
    config = request.config

    site_title = soup.find(id="site-title")
    if isinstance(site_title, Tag) and config.site_name:
        set_inner_html(site_title, render.site_title_fragment(config))
        if soup.find(id="post-detail") is None:
            set_document_title(soup, config.site_name)

    slogan = soup.find(id="site-slogan")
    if isinstance(slogan, Tag) and config.site_slogan:
        slogan.string = config.site_slogan

    hero = soup.find(id="hero-section")
    if isinstance(hero, Tag) and config.hero_image:
        image = _child_with_class(soup, hero, "img", "hero-image", first=True)
        image["src"] = config.hero_image
        image["alt"] = "Hero Image"
        if config.site_slogan:
            _set_hero_slogan(soup, config.site_slogan)

    nav = soup.find(id="nav")
    if isinstance(nav, Tag):
        set_inner_html(
            nav,
            render.nav_fragment(
                config.labels,
                page_name=request.page_name,
                current_label=request.label,
            ),
        )


def render_footer(soup: BeautifulSoup, request: PageRequest) -> None:
    """Fill the footer with accounts and the copyright line."""
    footer = soup.find(id="site-footer")
    if isinstance(footer, Tag):
        set_inner_html(
            footer,
            render.footer_fragment(request.config, current_year=request.today.year),
        )


def _remove_pagination(soup: BeautifulSoup) -> None:
    existing = soup.select_one(".pagination")
    if existing is not None:
        existing.decompose()


async def render_post_list(
    soup: BeautifulSoup,
    container: Tag,
    request: PageRequest,
    services: SiteServices,
) -> None:
    """Render one page of post summaries and its pagination control."""
    set_inner_html(container, render.loading_fragment())
    _remove_pagination(soup)
    label = request.label
    try:
        result = await services.source.list_posts(
            request.config, page=request.page, label=label
        )
        if result.posts:
            content = render.post_list_fragment(result.posts)
        else:
            content = render.empty_fragment("No posts yet")
        # An unknown page count may still point past a page of pull requests.
        control = None
        if result.posts or isinstance(result.pagination, UnknownPages):
            control = render.pagination_fragment(
                result.page, result.pagination, label=label
            )
        set_inner_html(container, content)
        if control is not None:
            _insert_after(container, control)
    except Exception as exc:  # noqa: BLE001 - rendered inline
        log_exception(logger, f"Failed to load posts for {request.url}", exc)
        set_inner_html(container, render.error_fragment(exc))


async def render_post_detail(
    soup: BeautifulSoup,
    container: Tag,
    request: PageRequest,
    services: SiteServices,
) -> None:
    """Render a single post with metadata, share links and code buttons."""
    config = request.config
    try:
        number = request.post_number()
        post = await services.source.get_post(config, number)
        meta = render.post_meta(post, config)
        content = render.post_detail_fragment(
            post, body_html=render_markdown(post.body), page_url=request.url
        )
        update_page_seo(soup, meta, request.url)
        _set_hero_slogan(soup, post.title)
        set_inner_html(container, content)
        add_code_copy_buttons(soup)
    except Exception as exc:  # noqa: BLE001 - rendered inline
        log_exception(logger, f"Failed to load post for {request.url}", exc)
        set_inner_html(container, render.error_fragment(exc))


async def render_project_list(
    soup: BeautifulSoup,
    container: Tag,
    request: PageRequest,
    services: SiteServices,
) -> None:
    """Render one card per configured project."""
    del soup, services
    projects = request.settings.projects if request.settings else []
    if not projects:
        set_inner_html(container, render.empty_fragment("No projects yet"))
        return
    set_inner_html(container, render.project_list_fragment(projects))


async def render_about(
    soup: BeautifulSoup,
    container: Tag,
    request: PageRequest,
    services: SiteServices,
) -> None:
    """Render the GitHub profile with the configured or fetched about text."""
    config = request.config
    set_inner_html(container, render.loading_fragment())
    try:
        user = await fetch_user(services.client, services.fetcher, config)
        if config.about_markdown:
            body_html = render_markdown(config.about_markdown)
        else:
            body_html = render.bio_fragment(user.bio)
        content = render.about_fragment(user, content_html=body_html)
        set_inner_html(container, content)
        add_code_copy_buttons(soup)
    except Exception as exc:  # noqa: BLE001 - rendered inline
        log_exception(logger, f"Failed to load profile for {config.username}", exc)
        set_inner_html(container, render.error_fragment(exc))


PageRoutine = cabc.Callable[
    [BeautifulSoup, Tag, PageRequest, SiteServices], cabc.Awaitable[None]
]

PAGE_ROUTINES: tuple[tuple[str, PageRoutine], ...] = (
    ("post-list", render_post_list),
    ("post-detail", render_post_detail),
    ("project-list", render_project_list),
    ("about-content", render_about),
)


async def render_page(
    template: str, request: PageRequest, services: SiteServices
) -> str:
    """Render a full page from ``template`` and return the HTML document."""
    soup = BeautifulSoup(template, "html.parser")
    if request.settings is not None:
        render_header(soup, request)
        render_footer(soup, request)

    for container_id, routine in PAGE_ROUTINES:
        container = soup.find(id=container_id)
        if isinstance(container, Tag):
            await routine(soup, container, request, services)
            break
    return str(soup)
