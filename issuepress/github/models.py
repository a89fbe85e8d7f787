"""Typed GitHub records used as blog content."""

from __future__ import annotations

import typing as typ

import msgspec


class Label(msgspec.Struct, kw_only=True, frozen=True):
    """Issue label, used as a post tag.

    Attributes
    ----------
    name : str
        Label name. Filtering compares it exactly and case-sensitively.
    id : int, optional
        GitHub database identifier.
    color : str, optional
        Hex colour without the leading ``#``.

    """

    name: str
    id: int | None = None
    color: str | None = None


class IssueUser(msgspec.Struct, kw_only=True, frozen=True):
    """Author summary attached to an issue."""

    login: str
    avatar_url: str | None = None
    html_url: str | None = None


class Issue(msgspec.Struct, kw_only=True, frozen=True):
    """A GitHub issue. Issues without ``pull_request`` are blog posts.

    Attributes
    ----------
    number : int
        Repository-scoped issue number, the identity of a post.
    title : str
        Post title.
    body : str, optional
        Markdown body. GitHub sends ``null`` for empty bodies.
    created_at : str
        ISO 8601 creation timestamp as sent by GitHub.
    labels : list[Label]
        Tags attached to the post.
    pull_request : dict, optional
        Present only when the record is a pull request.

    """

    number: int
    title: str
    created_at: str
    id: int | None = None
    body: str | None = None
    updated_at: str | None = None
    html_url: str | None = None
    labels: list[Label] = msgspec.field(default_factory=list)
    user: IssueUser | None = None
    pull_request: dict[str, typ.Any] | None = None

    @property
    def is_pull_request(self) -> bool:
        """Return True when GitHub marked this issue as a pull request."""
        return self.pull_request is not None

    def has_label(self, name: str) -> bool:
        """Return True when a label named exactly ``name`` is attached."""
        return any(label.name == name for label in self.labels)


class SnapshotLabel(msgspec.Struct, kw_only=True):
    """Label fields kept in a snapshot."""

    id: int | None = None
    name: str
    color: str | None = None


class SnapshotUser(msgspec.Struct, kw_only=True):
    """Author fields kept in a snapshot."""

    login: str
    avatar_url: str | None = None
    html_url: str | None = None


class SnapshotIssue(msgspec.Struct, kw_only=True):
    """The field subset written by the exporter.

    Converting a raw GitHub issue into this struct drops every field not
    listed here, since msgspec ignores unknown keys.
    """

    id: int | None = None
    number: int
    title: str
    body: str | None = None
    created_at: str
    updated_at: str | None = None
    html_url: str | None = None
    labels: list[SnapshotLabel] = msgspec.field(default_factory=list)
    user: SnapshotUser | None = None


class GitHubUser(msgspec.Struct, kw_only=True, frozen=True):
    """Public GitHub profile shown on the about page."""

    login: str
    name: str | None = None
    avatar_url: str | None = None
    html_url: str | None = None
    bio: str | None = None
    location: str | None = None
    blog: str | None = None
    public_repos: int = 0
    followers: int = 0
    following: int = 0


def is_pull_request(raw: dict[str, typ.Any]) -> bool:
    """Return True when a raw issue payload carries a ``pull_request`` field."""
    return raw.get("pull_request") is not None
