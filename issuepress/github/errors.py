"""GitHub REST errors."""

from __future__ import annotations

_RATE_LIMIT_STATUS = 403


class GitHubAPIError(RuntimeError):
    """Raised when GitHub returns a non-2xx response."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        """Initialise with a message and optional HTTP status code."""
        self.status_code = status_code
        super().__init__(message)

    @classmethod
    def for_status(cls, status_code: int) -> GitHubAPIError:
        """Return the error matching a non-2xx HTTP status."""
        if status_code == _RATE_LIMIT_STATUS:
            return RateLimitError.exceeded()
        return HttpStatusError.unexpected(status_code)


class RateLimitError(GitHubAPIError):
    """Raised when GitHub answers 403 because the rate limit is exhausted."""

    @classmethod
    def exceeded(cls) -> RateLimitError:
        """Return the user-readable rate limit error."""
        return cls(
            "GitHub API rate limit exceeded, please try again later",
            status_code=_RATE_LIMIT_STATUS,
        )


class HttpStatusError(GitHubAPIError):
    """Raised for non-2xx responses other than rate limiting."""

    @classmethod
    def unexpected(cls, status_code: int) -> HttpStatusError:
        """Return an error carrying the HTTP status code."""
        return cls(f"HTTP error! status: {status_code}", status_code=status_code)


class NetworkError(RuntimeError):
    """Raised when a request fails before any HTTP response arrives."""

    @classmethod
    def from_transport(cls, url: str, exc: Exception) -> NetworkError:
        """Return an error describing a transport failure for ``url``."""
        return cls(f"request to {url} failed: {exc}")


class GitHubResponseShapeError(RuntimeError):
    """Raised when a GitHub response does not match the expected shape."""

    @classmethod
    def expected(cls, what: str, url: str) -> GitHubResponseShapeError:
        """Return an error for a payload that is not ``what``."""
        return cls(f"GitHub response from {url} is not {what}")
