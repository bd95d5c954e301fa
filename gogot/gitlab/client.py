"""GitLab REST client used to look up projects by path."""

from __future__ import annotations

import asyncio
import dataclasses
import typing as typ
import urllib.parse
from http import HTTPStatus

import httpx
import msgspec

from .errors import (
    GitLabAPIError,
    GitLabConfigError,
    GitLabTransportError,
    ProjectNotFoundError,
)
from .models import GitLabProject, RepositoryRecord

DEFAULT_API_URL = "https://gitlab.com/api/v4"

_HTTP_ERROR_STATUS_THRESHOLD = 400
_TOKEN_HEADER = "PRIVATE-TOKEN"


class ProjectLookupClient(typ.Protocol):
    """Interface for resolving one exact path to a repository record."""

    async def lookup(
        self, path: str, *, credential: str | None = None
    ) -> RepositoryRecord:
        """Return the project at ``path`` or raise a ``ResolutionError``."""
        ...


@dataclasses.dataclass(frozen=True, slots=True)
class GitLabClientConfig:
    """Connection settings for the GitLab REST API."""

    api_url: str = DEFAULT_API_URL
    connect_timeout_s: float = 5.0
    request_timeout_s: float = 10.0
    user_agent: str = "gogot/0.1"

    @property
    def timeout(self) -> httpx.Timeout:
        """Return the per-phase timeouts with the tighter connect bound.

        ``lookup`` also bounds each whole request by ``request_timeout_s``.
        """
        return httpx.Timeout(self.request_timeout_s, connect=self.connect_timeout_s)


def project_url(api_url: str, path: str) -> str:
    """Return the ``/projects/:id`` URL for a namespaced path.

    GitLab accepts the URL-encoded ``path_with_namespace`` as the project
    id, so every ``/`` in the path is sent as ``%2F``.

    >>> project_url("https://gitlab.example/api/v4/", "group/project")
    'https://gitlab.example/api/v4/projects/group%2Fproject'

    """
    encoded = urllib.parse.quote(path, safe="")
    return f"{api_url.rstrip('/')}/projects/{encoded}"


class GitLabProjectsClient:
    """GitLab implementation of :class:`ProjectLookupClient`.

    The caller's ``Private-Token`` is attached per request and never kept
    on the client, so one instance is shared by every inbound request.
    """

    def __init__(
        self,
        config: GitLabClientConfig,
        *,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialise the client with the provided API configuration."""
        if not config.api_url.strip():
            raise GitLabConfigError.empty_api_url()

        self._config = config
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(
            timeout=config.timeout,
            headers={
                "User-Agent": config.user_agent,
                "Accept": "application/json",
            },
        )

    async def aclose(self) -> None:
        """Close any owned HTTP resources."""
        if self._owns_client:
            await self._client.aclose()

    async def lookup(
        self, path: str, *, credential: str | None = None
    ) -> RepositoryRecord:
        """Fetch the project at exactly ``path``.

        Raises
        ------
        ProjectNotFoundError
            GitLab answered 404.
        GitLabAPIError
            GitLab answered with any other error status.
        GitLabTransportError
            GitLab could not be reached, timed out, or sent a success
            response that is not a project document.

        """
        headers = {_TOKEN_HEADER: credential} if credential else None
        try:
            async with asyncio.timeout(self._config.request_timeout_s):
                response = await self._client.get(
                    project_url(self._config.api_url, path), headers=headers
                )
        except (httpx.TimeoutException, TimeoutError) as exc:
            raise GitLabTransportError.timeout() from exc
        except httpx.RequestError as exc:
            raise GitLabTransportError.network_error(str(exc)) from exc

        if response.status_code == HTTPStatus.NOT_FOUND:
            raise ProjectNotFoundError(path)
        if response.status_code >= _HTTP_ERROR_STATUS_THRESHOLD:
            raise GitLabAPIError.http_error(
                response.status_code, response.reason_phrase
            )

        try:
            project = msgspec.json.decode(response.content, type=GitLabProject)
        except msgspec.DecodeError as exc:
            raise GitLabTransportError.invalid_response(str(exc)) from exc
        return RepositoryRecord.from_project(project)
