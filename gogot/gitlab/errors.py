"""Failures raised while resolving a path against the GitLab API."""

from __future__ import annotations


class ResolutionError(Exception):
    """Base class for the reasons a prefix walk can produce no project."""


class ProjectNotFoundError(ResolutionError):
    """Raised when GitLab has no project at the requested path.

    Attributes
    ----------
    path
        The exact path that was looked up.

    """

    def __init__(self, path: str) -> None:
        """Initialise with the path that GitLab reported as missing."""
        self.path = path
        super().__init__(f"No GitLab project at {path!r}")


class GitLabAPIError(ResolutionError):
    """Raised when GitLab answers with an error status other than 404."""

    def __init__(self, message: str, *, status_code: int) -> None:
        """Initialise with a message and the HTTP status GitLab returned."""
        self.status_code = status_code
        super().__init__(message)

    @classmethod
    def http_error(cls, status_code: int, reason: str = "") -> GitLabAPIError:
        """Return an error carrying the status line GitLab responded with."""
        message = f"{status_code} {reason}".rstrip()
        return cls(message, status_code=status_code)


class GitLabTransportError(ResolutionError):
    """Raised when GitLab could not be reached or gave an unusable answer."""

    @classmethod
    def timeout(cls) -> GitLabTransportError:
        """Return an error for a connect or read timeout."""
        return cls("GitLab API request timed out")

    @classmethod
    def network_error(cls, detail: str) -> GitLabTransportError:
        """Return an error for DNS, TLS and connection failures."""
        return cls(f"GitLab API request failed: {detail}")

    @classmethod
    def invalid_response(cls, detail: str) -> GitLabTransportError:
        """Return an error for a success response that is not a project."""
        return cls(f"GitLab API returned an invalid project document: {detail}")


class GitLabConfigError(RuntimeError):
    """Raised when the GitLab client configuration is invalid."""

    @classmethod
    def empty_api_url(cls) -> GitLabConfigError:
        """Return an error when no API base URL is configured."""
        return cls("GitLab API URL must be non-empty")
