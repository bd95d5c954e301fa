"""Falcon error handlers for resolution and rendering failures.

Resources raise the domain exceptions from :mod:`gogot.gitlab.errors` and
:mod:`gogot.render`; the handlers below are the only place their HTTP
statuses are chosen. Each handler also records the exception on
``req.context.first_error`` for the access log.

Usage
-----
Register error handlers on the Falcon app::

    from gogot.api.errors import handle_render_error, handle_resolution_error
    from gogot.gitlab.errors import ResolutionError
    from gogot.render import RenderError

    app.add_error_handler(ResolutionError, handle_resolution_error)
    app.add_error_handler(RenderError, handle_render_error)

"""

from __future__ import annotations

import typing as typ
from http import HTTPStatus

import falcon

from gogot.render import failure_response

if typ.TYPE_CHECKING:
    from falcon.asgi import Request, Response

    from gogot.gitlab.errors import ResolutionError
    from gogot.render import RenderError

__all__ = ["handle_render_error", "handle_resolution_error", "record_first_error"]


def record_first_error(req: Request, ex: BaseException) -> None:
    """Remember ``ex`` on the request unless an earlier failure is recorded."""
    if getattr(req.context, "first_error", None) is None:
        req.context.first_error = ex


def _write_plain(resp: Response, status: int, body: str) -> None:
    resp.status = status
    resp.content_type = falcon.MEDIA_TEXT
    resp.text = body


async def handle_resolution_error(
    req: Request,
    resp: Response,
    ex: ResolutionError,
    _params: dict[str, typ.Any],
) -> None:
    """Map a ``ResolutionError`` to the status its classification dictates.

    Parameters
    ----------
    req
        Falcon request whose context receives the failure.
    resp
        Falcon response whose status and body are set.
    ex
        The failure retained by the prefix walk.
    _params
        URI template parameters (unused).

    """
    record_first_error(req, ex)
    status, body = failure_response(ex)
    _write_plain(resp, status, body)


async def handle_render_error(
    req: Request,
    resp: Response,
    ex: RenderError,
    _params: dict[str, typ.Any],
) -> None:
    """Map a ``RenderError`` to HTTP 500 with the error message."""
    record_first_error(req, ex)
    _write_plain(resp, HTTPStatus.INTERNAL_SERVER_ERROR, str(ex))
