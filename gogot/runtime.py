"""gogot runtime entrypoint.

This module provides the ASGI application factory used by Granian and the
``gogot`` console command. The factory reads its settings from ``GG_*``
environment variables (see :class:`gogot.config.GogotConfig`); the command
accepts flags that override them:

- ``--api`` (``GG_GITLAB_API``): GitLab API base URL
- ``--listen`` (``GG_LISTEN``): ``host:port`` to bind
- ``--cache-size`` (``GG_CACHE_SIZE``): resolved-project cache capacity
- ``--log-level`` (``GG_LOG_LEVEL``): log level

Run the service directly with ``python -m gogot.runtime``.
"""

from __future__ import annotations

import argparse
import os
import typing as typ

from gogot.api.app import AppDependencies
from gogot.api.app import create_app as _create_api_app
from gogot.cache import ProjectCache
from gogot.config import GogotConfig
from gogot.gitlab.client import GitLabProjectsClient
from gogot.logging import (
    configure_logging,
    get_logger,
    log_error,
    log_info,
    log_warning,
)
from gogot.resolver import PrefixWalker
from gogot.service import ImportPathService

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    import falcon.asgi

__all__ = ["build_parser", "create_app", "load_config", "main"]

logger = get_logger(__name__)

_FLAG_ENV_VARS = {
    "api": "GG_GITLAB_API",
    "listen": "GG_LISTEN",
    "cache_size": "GG_CACHE_SIZE",
    "log_level": "GG_LOG_LEVEL",
}


def create_app(config: GogotConfig | None = None) -> falcon.asgi.App:
    """Create the Falcon ASGI application from configuration.

    Builds one GitLab client, one cache and one service for the process;
    the client is closed when the ASGI server shuts down.

    Parameters
    ----------
    config
        Settings to use; read from the environment when ``None``.

    Returns
    -------
    falcon.asgi.App
        Configured Falcon ASGI application.

    """
    config = config or GogotConfig.from_env()
    client = GitLabProjectsClient(config.client_config())
    service = ImportPathService(PrefixWalker(client), ProjectCache(config.cache_size))
    return _create_api_app(AppDependencies(service=service, lookup_client=client))


def build_parser() -> argparse.ArgumentParser:
    """Return the command-line parser for ``gogot``."""
    parser = argparse.ArgumentParser(
        prog="gogot",
        description="Serve Go vanity import metadata for GitLab sub-group projects.",
    )
    parser.add_argument("--api", help="GitLab API endpoint {GG_GITLAB_API}")
    parser.add_argument("--listen", help="listen host:port {GG_LISTEN}")
    parser.add_argument(
        "--cache-size", type=int, help="size of the cache {GG_CACHE_SIZE}"
    )
    parser.add_argument("--log-level", help="log level {GG_LOG_LEVEL}")
    return parser


def load_config(argv: cabc.Sequence[str] | None = None) -> GogotConfig:
    """Parse flags and the environment into a validated configuration.

    Flags win over environment variables. Accepted flag values are written
    back to the environment so Granian workers, which build the app through
    :func:`create_app`, see the same settings.

    Raises
    ------
    SystemExit
        If a flag or environment value is invalid.

    """
    args = build_parser().parse_args(argv)
    for attr, env_var in _FLAG_ENV_VARS.items():
        value = getattr(args, attr)
        if value is not None:
            os.environ[env_var] = str(value)

    try:
        return GogotConfig.from_env()
    except ValueError as exc:
        log_error(logger, "Invalid configuration: %s", exc)
        raise SystemExit(1) from exc


def main(argv: cabc.Sequence[str] | None = None) -> None:
    """Start the gogot server using Granian."""
    from granian import Granian
    from granian.constants import Interfaces

    config = load_config(argv)

    normalized_level, invalid_level = configure_logging(config.log_level)
    if invalid_level:
        log_warning(
            logger,
            "Invalid GG_LOG_LEVEL %r, falling back to %s",
            config.log_level,
            normalized_level,
        )

    log_info(
        logger,
        "Starting gogot on %s (api=%s cache_size=%d log_level=%s)",
        config.listen,
        config.api_url,
        config.cache_size,
        normalized_level,
    )

    server = Granian(
        "gogot.runtime:create_app",
        address=config.host,
        port=config.port,
        interface=Interfaces.ASGI,
        factory=True,
    )
    server.serve()


if __name__ == "__main__":
    main()
