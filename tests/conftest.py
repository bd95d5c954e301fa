"""Shared fixtures for unit and feature tests."""

from __future__ import annotations

import falcon.asgi
import pytest

from gogot.api.app import AppDependencies, create_app
from gogot.cache import ProjectCache
from gogot.observability import AccessLogger
from gogot.resolver import PrefixWalker
from gogot.service import ImportPathService
from tests.helpers import FakeLookupClient, RecordingLogger, make_record

_GG_ENV_VARS = (
    "GG_GITLAB_API",
    "GG_LISTEN",
    "GG_CACHE_SIZE",
    "GG_CONNECT_TIMEOUT",
    "GG_REQUEST_TIMEOUT",
    "GG_LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def _clean_gg_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Isolate every test from ``GG_*`` variables set by the host or a test."""
    for name in _GG_ENV_VARS:
        # setenv first so values written by the code under test are undone
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)


@pytest.fixture
def lookup_client() -> FakeLookupClient:
    """Provide a lookup client that knows a single nested project."""
    return FakeLookupClient(
        {"group/subgroup/project": make_record("group/subgroup/project")}
    )


@pytest.fixture
def project_cache() -> ProjectCache:
    """Provide a small cache so eviction is easy to exercise."""
    return ProjectCache(4)


@pytest.fixture
def import_path_service(
    lookup_client: FakeLookupClient, project_cache: ProjectCache
) -> ImportPathService:
    """Wire a service over the fake lookup client."""
    return ImportPathService(PrefixWalker(lookup_client), project_cache)


@pytest.fixture
def access_log() -> RecordingLogger:
    """Capture access-log lines instead of sending them to femtologging."""
    return RecordingLogger()


@pytest.fixture
def app_dependencies(
    import_path_service: ImportPathService,
    access_log: RecordingLogger,
    lookup_client: FakeLookupClient,
) -> AppDependencies:
    """Bundle the application collaborators used by API tests."""
    return AppDependencies(
        service=import_path_service,
        access_logger=AccessLogger(access_log),
        lookup_client=lookup_client,  # type: ignore[arg-type]  # duck-typed fake
    )


@pytest.fixture
def falcon_app(app_dependencies: AppDependencies) -> falcon.asgi.App:
    """Build the Falcon app over the fake collaborators."""
    return create_app(app_dependencies)
