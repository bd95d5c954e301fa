"""Cache-fronted resolution of import paths.

:class:`ImportPathService` owns the request-level state machine: consult the
cache, walk GitLab on a miss, remember successes and forget entries on
request. Failures are never cached, so a later request retries GitLab.
"""

from __future__ import annotations

import typing as typ

from gogot.logging import get_logger, log_debug
from gogot.resolver import normalize_request_path

if typ.TYPE_CHECKING:
    from gogot.cache import ProjectCache
    from gogot.gitlab.models import RepositoryRecord
    from gogot.resolver import PrefixWalker

__all__ = ["ImportPathService"]

logger = get_logger(__name__)


class ImportPathService:
    """Resolve request paths through a shared cache and a prefix walker.

    The cache is the only state shared between requests; the service holds
    no lock of its own, so concurrent misses for different paths walk GitLab
    in parallel.
    """

    def __init__(self, walker: PrefixWalker, cache: ProjectCache) -> None:
        """Wire the service to its walker and the process-wide cache."""
        self._walker = walker
        self._cache = cache

    @property
    def cache(self) -> ProjectCache:
        """Return the cache backing this service."""
        return self._cache

    async def resolve(
        self, path: str, *, credential: str | None = None
    ) -> RepositoryRecord:
        """Return the project owning ``path``, from cache when possible.

        Raises
        ------
        ResolutionError
            When the walk finds no project; nothing is cached in that case.

        """
        key = normalize_request_path(path)
        cached = self._cache.get(key)
        if cached is not None:
            log_debug(logger, "cache hit for %r", key)
            return cached

        log_debug(logger, "cache miss for %r", key)
        record = await self._walker.resolve(key, credential=credential)
        self._cache.put(key, record)
        log_debug(
            logger, "cached %r as project %r", key, record.path_with_namespace
        )
        return record

    def invalidate(self, path: str) -> bool:
        """Forget the cached project for ``path``; report whether one existed."""
        key = normalize_request_path(path)
        removed = self._cache.invalidate(key)
        log_debug(logger, "invalidate %r removed=%s", key, removed)
        return removed
