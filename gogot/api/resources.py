"""Falcon sink answering Go vanity import requests.

Every path not claimed by a route reaches :class:`ImportPathResource`:

- ``GET`` and ``HEAD`` resolve the path and render ``go-import`` metadata.
- ``DELETE`` drops the cached project for the path.

Failures propagate as exceptions to the handlers in :mod:`gogot.api.errors`.

Usage
-----
Register the sink on the Falcon app::

    resource = ImportPathResource(service)
    app.add_sink(resource.on_request, prefix="/")

"""

from __future__ import annotations

import typing as typ
from http import HTTPStatus

import falcon

from gogot.gitlab.errors import ProjectNotFoundError
from gogot.render import render_go_import
from gogot.resolver import normalize_request_path

if typ.TYPE_CHECKING:
    from falcon.asgi import Request, Response

    from gogot.service import ImportPathService

__all__ = ["ALLOWED_METHODS", "CREDENTIAL_HEADER", "ImportPathResource"]

CREDENTIAL_HEADER = "Private-Token"
ALLOWED_METHODS = ("GET", "HEAD", "DELETE")


class ImportPathResource:
    """Resolve, render and invalidate import paths.

    Parameters
    ----------
    service
        Cache-fronted resolver shared by all requests.

    """

    def __init__(self, service: ImportPathService) -> None:
        """Configure the resource with the import path service."""
        self._service = service

    async def on_request(self, req: Request, resp: Response, **_kwargs: str) -> None:
        """Dispatch a sink request on its HTTP method.

        Raises
        ------
        falcon.HTTPMethodNotAllowed
            For methods other than ``GET``, ``HEAD`` and ``DELETE``.

        """
        if req.method in {"GET", "HEAD"}:
            await self.on_get(req, resp)
        elif req.method == "DELETE":
            await self.on_delete(req, resp)
        else:
            raise falcon.HTTPMethodNotAllowed(list(ALLOWED_METHODS))

    async def on_get(self, req: Request, resp: Response) -> None:
        """Render import metadata for the project owning ``req.path``.

        The ``Private-Token`` header, when present, is forwarded to GitLab
        for this request only.
        """
        record = await self._service.resolve(
            req.path, credential=req.get_header(CREDENTIAL_HEADER)
        )
        resp.text = render_go_import(record)
        resp.content_type = falcon.MEDIA_HTML
        resp.status = HTTPStatus.OK

    async def on_delete(self, req: Request, resp: Response) -> None:
        """Forget the cached project for ``req.path``.

        Raises
        ------
        ProjectNotFoundError
            When nothing was cached for the path.

        """
        if not self._service.invalidate(req.path):
            raise ProjectNotFoundError(normalize_request_path(req.path))
        resp.text = "OK"
        resp.content_type = falcon.MEDIA_TEXT
        resp.status = HTTPStatus.OK
