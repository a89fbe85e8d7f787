"""GitHub REST client for issues and user profiles."""

from __future__ import annotations

import dataclasses
import os
import typing as typ

import httpx

from issuepress.logging import get_logger, log_debug, log_info, log_warning

from .errors import GitHubAPIError, GitHubResponseShapeError, NetworkError

logger = get_logger(__name__)

TOKEN_ENV_VAR = "GITHUB_TOKEN"


@dataclasses.dataclass(frozen=True, slots=True)
class GitHubRestConfig:
    """Configuration for the GitHub REST API client.

    A token is optional. Anonymous requests work but GitHub allows far
    fewer of them per hour.
    """

    token: str | None = None
    api_base_url: str = "https://api.github.com"
    user_agent: str = "issuepress/0.1"

    @classmethod
    def from_env(cls) -> GitHubRestConfig:
        """Build configuration using the ``GITHUB_TOKEN`` env var."""
        token = os.environ.get(TOKEN_ENV_VAR, "").strip()
        if token:
            log_info(logger, "Loaded %s", TOKEN_ENV_VAR)
            return cls(token=token)
        log_warning(
            logger,
            "%s not set; using anonymous requests with a lower rate limit",
            TOKEN_ENV_VAR,
        )
        return cls()


class GitHubRestClient:
    """Thin async wrapper over the GitHub issues and users endpoints.

    The client builds request URLs and maps HTTP failures onto the
    :mod:`issuepress.github.errors` hierarchy. Caching is layered on top by
    :class:`issuepress.github.cache.CachedFetcher`.
    """

    def __init__(
        self,
        config: GitHubRestConfig | None = None,
        *,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialise the client, creating an HTTP client when none is given."""
        self._config = config or GitHubRestConfig()
        headers = {
            "User-Agent": self._config.user_agent,
            "Accept": "application/vnd.github+json",
        }
        if self._config.token:
            headers["Authorization"] = f"token {self._config.token}"
        self._headers = headers
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient()

    async def aclose(self) -> None:
        """Close any owned HTTP resources."""
        if self._owns_client:
            await self._client.aclose()

    def issues_url(
        self,
        owner: str,
        repo: str,
        *,
        page: int,
        per_page: int,
        labels: str | None = None,
        creator: str | None = None,
    ) -> str:
        """Return the "list repository issues" URL for open issues."""
        params: dict[str, str | int] = {}
        if creator:
            params["creator"] = creator
        params.update({"state": "open", "per_page": per_page, "page": page})
        if labels:
            params["labels"] = labels
        url = httpx.URL(
            f"{self._config.api_base_url}/repos/{owner}/{repo}/issues",
            params=params,
        )
        return str(url)

    def issue_url(self, owner: str, repo: str, number: int) -> str:
        """Return the "get an issue" URL."""
        return f"{self._config.api_base_url}/repos/{owner}/{repo}/issues/{number}"

    def user_url(self, username: str) -> str:
        """Return the "get a user" URL."""
        return f"{self._config.api_base_url}/users/{username}"

    async def get_json(self, url: str) -> typ.Any:  # noqa: ANN401 - arbitrary JSON
        """GET ``url`` and return the decoded JSON body.

        Raises
        ------
        RateLimitError
            When GitHub answers 403.
        HttpStatusError
            For any other non-2xx status.
        NetworkError
            When the request fails before a response is received.
        GitHubResponseShapeError
            When a successful response body is not JSON.

        """
        log_debug(logger, "GET %s", url)
        try:
            response = await self._client.get(url, headers=self._headers)
        except httpx.HTTPError as exc:
            raise NetworkError.from_transport(url, exc) from exc
        if not response.is_success:
            log_warning(
                logger,
                "GitHub request failed: %s %s",
                response.status_code,
                response.reason_phrase,
            )
            raise GitHubAPIError.for_status(response.status_code)
        try:
            return response.json()
        except ValueError as exc:
            raise GitHubResponseShapeError.expected("JSON", url) from exc
