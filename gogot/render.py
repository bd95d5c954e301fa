"""Render Go vanity import metadata and failure statuses.

``go get`` fetches ``https://<import path>?go-get=1`` and reads the
``go-import`` meta tag to find the repository; ``go-source`` tells
documentation tools where to browse the code.
"""

from __future__ import annotations

import typing as typ
from http import HTTPStatus

from gogot.gitlab.errors import GitLabAPIError, ProjectNotFoundError

if typ.TYPE_CHECKING:
    from gogot.gitlab.errors import ResolutionError
    from gogot.gitlab.models import RepositoryRecord

__all__ = ["GO_IMPORT_TEMPLATE", "RenderError", "failure_response", "render_go_import"]

GO_IMPORT_TEMPLATE = """<html><head>
<meta name="go-import" content="{host}/{path} git {repo_url}" />
<meta name="go-source" content="{host}/{path} _ {web_url}/tree/master{{/dir}} {web_url}/tree/master{{/dir}}/{{file}}#L{{line}}" />
</head></html>
"""


class RenderError(Exception):
    """Raised when a resolved project cannot be turned into import metadata."""

    @classmethod
    def missing_host(cls, repo_url: str) -> RenderError:
        """Return an error for a clone URL without a network location."""
        return cls(f"repository URL has no host: {repo_url!r}")

    @classmethod
    def malformed_url(cls, repo_url: str) -> RenderError:
        """Return an error for a clone URL that cannot be parsed."""
        return cls(f"repository URL is malformed: {repo_url!r}")


def render_go_import(record: RepositoryRecord) -> str:
    """Return the HTML document carrying ``go-import``/``go-source`` tags.

    Raises
    ------
    RenderError
        If the record's clone URL cannot be parsed or has no host to prefix
        the import path with.

    """
    try:
        host = record.host
    except ValueError as exc:
        raise RenderError.malformed_url(record.repo_url) from exc
    if not host:
        raise RenderError.missing_host(record.repo_url)
    return GO_IMPORT_TEMPLATE.format(
        host=host,
        path=record.path_with_namespace,
        repo_url=record.repo_url,
        web_url=record.web_url,
    )


def failure_response(failure: ResolutionError) -> tuple[int, str]:
    """Return the HTTP status and body reported for a resolution failure.

    ``ProjectNotFoundError`` maps to 404 with an empty body, ``GitLabAPIError``
    to GitLab's own status and status line, and anything else to 500 with the
    error message, which covers ``GitLabTransportError``.
    """
    if isinstance(failure, ProjectNotFoundError):
        return (HTTPStatus.NOT_FOUND, "")
    if isinstance(failure, GitLabAPIError):
        return (failure.status_code, str(failure))
    return (HTTPStatus.INTERNAL_SERVER_ERROR, str(failure))
