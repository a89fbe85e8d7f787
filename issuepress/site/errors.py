"""Errors raised while loading site configuration and resolving pages."""

from __future__ import annotations

import typing as typ

if typ.TYPE_CHECKING:
    from pathlib import Path


class ConfigReadError(RuntimeError):
    """Raised when a site settings file cannot be read or decoded."""

    @classmethod
    def unreadable(cls, path: Path, exc: Exception) -> ConfigReadError:
        """Return an error for a missing or undecodable settings file."""
        return cls(f"failed to read {path}: {exc}")

    @classmethod
    def missing_field(cls, path: Path, field: str) -> ConfigReadError:
        """Return an error for a required setting that is absent."""
        return cls(f"{path} must define a non-empty {field!r}")


class ParameterError(ValueError):
    """Raised when a page is requested with unusable query parameters."""


class MissingParameterError(ParameterError):
    """Raised when a required query parameter is absent."""

    def __init__(self, name: str) -> None:
        """Record the missing parameter name."""
        self.name = name
        super().__init__(f"no post {name} specified")


class InvalidParameterError(ParameterError):
    """Raised when a query parameter cannot be interpreted."""

    def __init__(self, name: str, value: str) -> None:
        """Record the parameter name and offending value."""
        self.name = name
        self.value = value
        super().__init__(f"invalid post {name}: {value!r}")


class PostNotFoundError(LookupError):
    """Raised when a snapshot holds no post with the requested number."""

    def __init__(self, number: int) -> None:
        """Record the post number that was looked up."""
        self.number = number
        super().__init__(f"post #{number} not found")
