"""Liveness and readiness probes.

Both probes live under ``/-/``, a prefix GitLab never allows as a group or
project name, so they cannot shadow an import path.

Usage
-----
Register health endpoints on the Falcon app::

    app.add_route("/-/health", HealthResource())
    app.add_route("/-/ready", ReadyResource(cache))

"""

from __future__ import annotations

import typing as typ
from http import HTTPStatus

if typ.TYPE_CHECKING:
    from falcon.asgi import Request, Response

    from gogot.cache import ProjectCache

__all__ = ["HealthResource", "ReadyResource"]


class HealthResource:
    """Liveness probe returning ``{"status": "ok"}``."""

    async def on_get(self, _req: Request, resp: Response) -> None:
        """Handle ``GET /-/health``."""
        resp.media = {"status": "ok"}
        resp.status = HTTPStatus.OK


class ReadyResource:
    """Readiness probe reporting cache occupancy.

    The service keeps no connections that need warming, so it is ready as
    soon as it is serving. The cache figures let operators size
    ``GG_CACHE_SIZE``.
    """

    def __init__(self, cache: ProjectCache) -> None:
        """Hold the cache whose occupancy is reported."""
        self._cache = cache

    async def on_get(self, _req: Request, resp: Response) -> None:
        """Handle ``GET /-/ready``."""
        resp.media = {
            "status": "ready",
            "cache_entries": len(self._cache),
            "cache_capacity": self._cache.capacity,
        }
        resp.status = HTTPStatus.OK
