"""Application factory for the gogot Falcon ASGI application.

Usage
-----
Wire the application from its collaborators::

    from gogot.api.app import AppDependencies, create_app
    from gogot.cache import ProjectCache
    from gogot.gitlab import GitLabClientConfig, GitLabProjectsClient
    from gogot.resolver import PrefixWalker
    from gogot.service import ImportPathService

    client = GitLabProjectsClient(GitLabClientConfig())
    service = ImportPathService(PrefixWalker(client), ProjectCache(512))
    app = create_app(AppDependencies(service=service, lookup_client=client))

"""

from __future__ import annotations

import dataclasses as dc
import typing as typ

import falcon.asgi

from gogot.api.errors import handle_render_error, handle_resolution_error
from gogot.api.health.resources import HealthResource, ReadyResource
from gogot.api.middleware import AccessLogMiddleware, LookupClientLifespan
from gogot.api.resources import ImportPathResource
from gogot.gitlab.errors import ResolutionError
from gogot.render import RenderError

if typ.TYPE_CHECKING:
    from gogot.gitlab.client import GitLabProjectsClient
    from gogot.observability import AccessLogger
    from gogot.service import ImportPathService

__all__ = ["AppDependencies", "create_app"]


@dc.dataclass(frozen=True, slots=True)
class AppDependencies:
    """Collaborators for the Falcon ASGI application.

    Attributes
    ----------
    service
        Cache-fronted import path resolver.
    access_logger
        Access-log sink; defaults to femtologging.
    lookup_client
        GitLab client closed when the server shuts down. Leave ``None`` when
        the caller manages the client's lifetime.

    """

    service: ImportPathService
    access_logger: AccessLogger | None = None
    lookup_client: GitLabProjectsClient | None = None


def create_app(dependencies: AppDependencies) -> falcon.asgi.App:
    """Create and configure the Falcon ASGI application.

    ``/-/health`` and ``/-/ready`` are routes; every other path is handled
    by the import path sink, since Falcon consults routes before sinks.

    Parameters
    ----------
    dependencies
        Application collaborators.

    Returns
    -------
    falcon.asgi.App
        Configured Falcon ASGI application.

    """
    middleware: list[object] = [AccessLogMiddleware(dependencies.access_logger)]
    if dependencies.lookup_client is not None:
        middleware.append(LookupClientLifespan(dependencies.lookup_client))

    app = falcon.asgi.App(middleware=middleware)  # type: ignore[no-matching-overload]  # Falcon stubs

    app.add_route("/-/health", HealthResource())
    app.add_route("/-/ready", ReadyResource(dependencies.service.cache))

    resource = ImportPathResource(dependencies.service)
    app.add_sink(resource.on_request, prefix="/")

    app.add_error_handler(ResolutionError, handle_resolution_error)
    app.add_error_handler(RenderError, handle_render_error)

    return app
