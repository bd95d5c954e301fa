"""Unit tests for the gogot Falcon application.

Usage
-----
Run with pytest::

    pytest tests/unit/test_api_app.py

"""

from __future__ import annotations

import typing as typ
from http import HTTPStatus

import falcon.testing
import pytest

from gogot.gitlab.errors import GitLabAPIError, GitLabTransportError
from gogot.gitlab.models import RepositoryRecord

if typ.TYPE_CHECKING:
    import falcon.asgi

    from tests.helpers import FakeLookupClient, RecordingLogger

_PROJECT = "group/subgroup/project"


@pytest.fixture
def client(falcon_app: falcon.asgi.App) -> falcon.testing.TestClient:
    """Create a test client over the fake-backed application."""
    return falcon.testing.TestClient(falcon_app)


class TestImportPaths:
    """GET and HEAD on import paths."""

    def test_package_path_renders_project_metadata(
        self, client: falcon.testing.TestClient
    ) -> None:
        """A package below a project renders the project's go-import tag."""
        result = client.simulate_get(f"/{_PROJECT}/pkg/sub", params={"go-get": "1"})

        assert result.status_code == HTTPStatus.OK
        assert result.headers["content-type"].startswith("text/html")
        assert (
            f'<meta name="go-import" content="gitlab.example.com/{_PROJECT} git '
            f'https://gitlab.example.com/{_PROJECT}.git" />'
        ) in result.text

    def test_head_is_answered_like_get(
        self, client: falcon.testing.TestClient
    ) -> None:
        """HEAD resolves the path just as GET does."""
        result = client.simulate_head(f"/{_PROJECT}")

        assert result.status_code == HTTPStatus.OK
        assert result.headers["content-type"].startswith("text/html")

    def test_private_token_is_forwarded(
        self, client: falcon.testing.TestClient, lookup_client: FakeLookupClient
    ) -> None:
        """The caller's Private-Token reaches every lookup of the walk."""
        client.simulate_get(f"/{_PROJECT}/pkg", headers={"Private-Token": "t0k3n"})

        assert {credential for _, credential in lookup_client.calls} == {"t0k3n"}

    def test_second_request_is_served_from_cache(
        self, client: falcon.testing.TestClient, lookup_client: FakeLookupClient
    ) -> None:
        """Repeated requests for a path look GitLab up once."""
        first = client.simulate_get(f"/{_PROJECT}")
        second = client.simulate_get(f"/{_PROJECT}")

        assert first.text == second.text
        assert lookup_client.looked_up == [_PROJECT]

    def test_unknown_path_is_404_with_empty_body(
        self, client: falcon.testing.TestClient
    ) -> None:
        """Paths with no project prefix answer 404 and no body."""
        result = client.simulate_get("/nobody/nothing")

        assert result.status_code == HTTPStatus.NOT_FOUND
        assert result.text == ""

    def test_root_path_is_404_without_lookup(
        self, client: falcon.testing.TestClient, lookup_client: FakeLookupClient
    ) -> None:
        """The root path has no candidate prefixes."""
        result = client.simulate_get("/")

        assert result.status_code == HTTPStatus.NOT_FOUND
        assert lookup_client.calls == []

    def test_backend_status_is_passed_through(
        self, client: falcon.testing.TestClient, lookup_client: FakeLookupClient
    ) -> None:
        """A GitLab error status is returned with its status line."""
        lookup_client.outcomes["private/repo"] = GitLabAPIError.http_error(
            403, "Forbidden"
        )

        result = client.simulate_get("/private/repo")

        assert result.status_code == HTTPStatus.FORBIDDEN
        assert result.text == "403 Forbidden"

    def test_transport_failure_is_500(
        self, client: falcon.testing.TestClient, lookup_client: FakeLookupClient
    ) -> None:
        """Unreachable GitLab answers 500 with the failure message."""
        lookup_client.outcomes["slow/repo"] = GitLabTransportError.timeout()

        result = client.simulate_get("/slow/repo")

        assert result.status_code == HTTPStatus.INTERNAL_SERVER_ERROR
        assert result.text == "GitLab API request timed out"

    def test_record_without_host_is_500(
        self, client: falcon.testing.TestClient, lookup_client: FakeLookupClient
    ) -> None:
        """A project whose clone URL has no host cannot be rendered."""
        lookup_client.outcomes["odd/repo"] = RepositoryRecord(
            path_with_namespace="odd/repo",
            repo_url="odd/repo.git",
            web_url="https://gitlab.example.com/odd/repo",
        )

        result = client.simulate_get("/odd/repo")

        assert result.status_code == HTTPStatus.INTERNAL_SERVER_ERROR
        assert "no host" in result.text

    def test_malformed_clone_url_is_500_with_message(
        self,
        client: falcon.testing.TestClient,
        lookup_client: FakeLookupClient,
        access_log: RecordingLogger,
    ) -> None:
        """An unparseable clone URL is a render failure in body and log."""
        lookup_client.outcomes["odd/ipv6"] = RepositoryRecord(
            path_with_namespace="odd/ipv6",
            repo_url="https://[gitlab.example/odd/ipv6.git",
            web_url="https://gitlab.example.com/odd/ipv6",
        )

        result = client.simulate_get("/odd/ipv6")

        assert result.status_code == HTTPStatus.INTERNAL_SERVER_ERROR
        assert result.headers["content-type"].startswith("text/plain")
        assert "repository URL is malformed" in result.text
        [message] = access_log.messages
        assert "status=500 error_kind=render" in message


class TestInvalidation:
    """DELETE on import paths."""

    def test_delete_cached_path(
        self, client: falcon.testing.TestClient, lookup_client: FakeLookupClient
    ) -> None:
        """Deleting a cached path answers OK and forces a new lookup."""
        client.simulate_get(f"/{_PROJECT}")

        result = client.simulate_delete(f"/{_PROJECT}")
        client.simulate_get(f"/{_PROJECT}")

        assert result.status_code == HTTPStatus.OK
        assert result.text == "OK"
        assert lookup_client.looked_up == [_PROJECT, _PROJECT]

    def test_delete_uncached_path_is_404(
        self, client: falcon.testing.TestClient, lookup_client: FakeLookupClient
    ) -> None:
        """Deleting a path that is not cached answers 404 without a lookup."""
        result = client.simulate_delete(f"/{_PROJECT}")

        assert result.status_code == HTTPStatus.NOT_FOUND
        assert lookup_client.calls == []


def test_other_methods_are_not_allowed(client: falcon.testing.TestClient) -> None:
    """Only GET, HEAD and DELETE are served on import paths."""
    result = client.simulate_post(f"/{_PROJECT}")

    assert result.status_code == HTTPStatus.METHOD_NOT_ALLOWED
    assert result.headers["allow"] == "GET, HEAD, DELETE"


class TestProbes:
    """Health and readiness endpoints."""

    def test_health(self, client: falcon.testing.TestClient) -> None:
        """GET /-/health returns ok."""
        result = client.simulate_get("/-/health")

        assert result.status_code == HTTPStatus.OK
        assert result.json == {"status": "ok"}

    def test_ready_reports_cache_occupancy(
        self, client: falcon.testing.TestClient
    ) -> None:
        """GET /-/ready reports cache entries and capacity."""
        client.simulate_get(f"/{_PROJECT}")

        result = client.simulate_get("/-/ready")

        assert result.status_code == HTTPStatus.OK
        assert result.json == {
            "status": "ready",
            "cache_entries": 1,
            "cache_capacity": 4,
        }


class TestAccessLog:
    """One access-log line per request."""

    def test_logs_each_request_once(
        self, client: falcon.testing.TestClient, access_log: RecordingLogger
    ) -> None:
        """Successful and failed requests each produce one line."""
        client.simulate_get(f"/{_PROJECT}")
        client.simulate_get("/nobody/nothing")

        assert len(access_log.calls) == 2
        assert "status=200 error_kind=- error=-" in access_log.messages[0]
        assert "status=404 error_kind=not_found" in access_log.messages[1]

    def test_logs_forwarded_client_address(
        self, client: falcon.testing.TestClient, access_log: RecordingLogger
    ) -> None:
        """The originating address is taken from X-Forwarded-For."""
        client.simulate_get(
            f"/{_PROJECT}", headers={"X-Forwarded-For": "198.51.100.4, 10.0.0.1"}
        )

        assert "remote=198.51.100.4 " in access_log.messages[0]

    def test_never_logs_private_token(
        self, client: falcon.testing.TestClient, access_log: RecordingLogger
    ) -> None:
        """The caller's token does not appear in access logs."""
        client.simulate_get("/private/repo", headers={"Private-Token": "s3cr3t-t0k3n"})

        assert all("s3cr3t-t0k3n" not in message for message in access_log.messages)

    def test_server_errors_log_at_error_level(
        self,
        client: falcon.testing.TestClient,
        access_log: RecordingLogger,
        lookup_client: FakeLookupClient,
    ) -> None:
        """5xx responses are logged at ERROR."""
        lookup_client.outcomes["slow/repo"] = GitLabTransportError.timeout()

        client.simulate_get("/slow/repo")

        [(level, message, _, _)] = access_log.calls
        assert level == "ERROR"
        assert "method=GET path=/slow/repo" in message
