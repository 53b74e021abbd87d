"""Exception types raised by the release workflow."""

from __future__ import annotations

from typing import Optional


class ReleaseToolError(RuntimeError):
    """Base class for every failure the runner knows how to report."""


class ConfigurationError(ReleaseToolError):
    """Missing token or inputs that make the run impossible."""


class TransportError(ReleaseToolError):
    """Network failure, timeout, or an unreadable response."""


class MalformedResponseError(TransportError):
    """Response body was not JSON or lacked a required field."""


class GitHubAPIError(ReleaseToolError):
    """GitHub answered with a status the workflow cannot continue from."""

    def __init__(self, status_code: int, url: str, message: Optional[str] = None) -> None:
        self.status_code = status_code
        self.url = url
        self.message = message or ""
        detail = f" :: {self.message}" if self.message else ""
        super().__init__(f"HTTP {status_code} for {url}{detail}")


__all__ = [
    "ReleaseToolError",
    "ConfigurationError",
    "TransportError",
    "MalformedResponseError",
    "GitHubAPIError",
]
