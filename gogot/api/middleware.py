"""Falcon middleware for access logging and lookup-client lifetime.

``AccessLogMiddleware`` stamps each request on arrival and logs exactly one
access record when the response is finalised, whether the request was
answered by a resource, an error handler or Falcon itself.

Usage
-----
Register the middleware when creating the Falcon app::

    from gogot.api.middleware import AccessLogMiddleware
    from gogot.observability import AccessLogger

    app = falcon.asgi.App(middleware=[AccessLogMiddleware(AccessLogger())])

"""

from __future__ import annotations

import datetime as dt
import time
import typing as typ

import falcon

from gogot.observability import AccessLogger, AccessLogRecord

if typ.TYPE_CHECKING:
    from falcon.asgi import Request, Response

__all__ = ["AccessLogMiddleware", "LookupClientLifespan"]


class _Closeable(typ.Protocol):
    async def aclose(self) -> None: ...


def _client_address(req: Request) -> str:
    """Return the originating client address, honouring forwarding headers."""
    route = req.access_route
    if route:
        return route[0]
    return req.remote_addr or "-"


class AccessLogMiddleware:
    """Falcon middleware emitting one access-log record per request.

    Parameters
    ----------
    access_logger
        Sink for the finished records.

    """

    def __init__(self, access_logger: AccessLogger | None = None) -> None:
        """Initialize the middleware with the access logger to use."""
        self._access_logger = access_logger or AccessLogger()

    async def process_request(self, req: Request, _resp: Response) -> None:
        """Start the request clock and clear the first-error slot."""
        req.context.started_at = time.perf_counter()
        req.context.first_error = None

    async def process_response(
        self,
        req: Request,
        resp: Response,
        _resource: object,
        req_succeeded: bool,  # noqa: FBT001 - Falcon middleware signature requires positional bool
    ) -> None:
        """Log the finished request.

        Parameters
        ----------
        req
            Falcon request carrying the start time and first error.
        resp
            Falcon response whose final status is logged.
        _resource
            The matched Falcon resource (unused).
        req_succeeded
            ``False`` when an exception was raised while handling the
            request (unused; the status already reflects it).

        """
        del req_succeeded
        started_at = getattr(req.context, "started_at", None)
        elapsed = (
            0.0 if started_at is None else time.perf_counter() - started_at
        )
        self._access_logger.log_request(
            AccessLogRecord(
                remote=_client_address(req),
                method=req.method,
                path=req.path,
                elapsed=dt.timedelta(seconds=elapsed),
                status=falcon.http_status_to_code(resp.status),
                error=getattr(req.context, "first_error", None),
            )
        )


class LookupClientLifespan:
    """Close the shared GitLab client when the ASGI server shuts down."""

    def __init__(self, client: _Closeable) -> None:
        """Hold the client whose connections are released at shutdown."""
        self._client = client

    async def process_shutdown(
        self, _scope: dict[str, typ.Any], _event: dict[str, typ.Any]
    ) -> None:
        """Close the client's connection pool."""
        await self._client.aclose()
