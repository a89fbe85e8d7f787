"""GitHub REST access: client, response cache, errors and record types."""

from __future__ import annotations

from .cache import (
    CachedFetcher,
    CacheEntry,
    FileResponseCache,
    MemoryResponseCache,
    ResponseCache,
)
from .client import GitHubRestClient, GitHubRestConfig
from .errors import (
    GitHubAPIError,
    GitHubResponseShapeError,
    HttpStatusError,
    NetworkError,
    RateLimitError,
)
from .models import GitHubUser, Issue, IssueUser, Label

__all__ = [
    "CacheEntry",
    "CachedFetcher",
    "FileResponseCache",
    "GitHubAPIError",
    "GitHubResponseShapeError",
    "GitHubRestClient",
    "GitHubRestConfig",
    "GitHubUser",
    "HttpStatusError",
    "Issue",
    "IssueUser",
    "Label",
    "MemoryResponseCache",
    "NetworkError",
    "RateLimitError",
    "ResponseCache",
]
