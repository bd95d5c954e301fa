"""Resolve a request path to the GitLab project that owns it.

Go import paths may point below a project root (``group/project/pkg/sub``)
and GitLab projects may sit in nested sub-groups, so the literal path is not
necessarily a project. :class:`PrefixWalker` asks GitLab about the full path
first and then about each shorter prefix until one resolves or the first
segment has been tried.

When every prefix fails, the failure for the full path is reported: it is
the most specific answer GitLab gave for what the client asked.
"""

from __future__ import annotations

import posixpath
import typing as typ

from gogot.gitlab.errors import ProjectNotFoundError, ResolutionError
from gogot.logging import get_logger, log_debug

if typ.TYPE_CHECKING:
    from gogot.gitlab.client import ProjectLookupClient
    from gogot.gitlab.models import RepositoryRecord

__all__ = ["PrefixWalker", "candidate_paths", "normalize_request_path"]

logger = get_logger(__name__)

_SEPARATOR = "/"


def normalize_request_path(path: str) -> str:
    """Strip leading separators from a request path.

    >>> normalize_request_path("//group/project")
    'group/project'

    """
    return path.lstrip(_SEPARATOR)


def _parent(candidate: str) -> str | None:
    """Return ``candidate`` without its last segment, or ``None`` at the root."""
    parent = posixpath.dirname(candidate)
    return parent or None


def candidate_paths(path: str) -> list[str]:
    """Return the prefixes a walk of ``path`` tries, most specific first.

    >>> candidate_paths("/group/project/pkg")
    ['group/project/pkg', 'group/project', 'group']
    >>> candidate_paths("/")
    []

    """
    candidate: str | None = normalize_request_path(path)
    candidates: list[str] = []
    while candidate:
        candidates.append(candidate)
        candidate = _parent(candidate)
    return candidates


class PrefixWalker:
    """Find the project owning the longest resolvable prefix of a path.

    Parameters
    ----------
    client
        Lookup client queried once per candidate prefix.

    """

    def __init__(self, client: ProjectLookupClient) -> None:
        """Configure the walker with its lookup client."""
        self._client = client

    async def resolve(
        self, path: str, *, credential: str | None = None
    ) -> RepositoryRecord:
        """Return the project for ``path`` or its nearest resolvable ancestor.

        Parameters
        ----------
        path
            Request path; leading separators are ignored.
        credential
            Caller's GitLab token, forwarded to every lookup of this walk.

        Returns
        -------
        RepositoryRecord
            The first project found while walking towards the root.

        Raises
        ------
        ResolutionError
            The failure raised for the first (deepest) prefix when no prefix
            resolves. An empty path raises ``ProjectNotFoundError`` without
            contacting GitLab.

        """
        first_failure: ResolutionError | None = None
        for candidate in candidate_paths(path):
            try:
                record = await self._client.lookup(candidate, credential=credential)
            except ResolutionError as exc:
                log_debug(
                    logger,
                    "lookup of %r failed: %s: %s",
                    candidate,
                    type(exc).__name__,
                    exc,
                )
                if first_failure is None:
                    first_failure = exc
                continue

            log_debug(
                logger,
                "resolved %r to project %r",
                path,
                record.path_with_namespace,
            )
            return record

        if first_failure is None:
            raise ProjectNotFoundError(normalize_request_path(path))
        raise first_failure
