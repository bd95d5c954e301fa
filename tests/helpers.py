"""Shared test utilities."""

from __future__ import annotations

from gogot.gitlab.errors import ProjectNotFoundError, ResolutionError
from gogot.gitlab.models import RepositoryRecord

DEFAULT_HOST = "gitlab.example.com"


def make_record(path: str, *, host: str = DEFAULT_HOST) -> RepositoryRecord:
    """Build the record GitLab would return for a project at ``path``."""
    return RepositoryRecord(
        path_with_namespace=path,
        repo_url=f"https://{host}/{path}.git",
        web_url=f"https://{host}/{path}",
    )


class FakeLookupClient:
    """Lookup client answering from a mapping of exact paths to outcomes.

    Paths missing from ``outcomes`` raise ``ProjectNotFoundError``; every
    call is recorded with the credential it carried.
    """

    def __init__(
        self,
        outcomes: dict[str, RepositoryRecord | ResolutionError] | None = None,
    ) -> None:
        self.outcomes = outcomes or {}
        self.calls: list[tuple[str, str | None]] = []
        self.closed = False

    @property
    def looked_up(self) -> list[str]:
        """Return the paths looked up, in call order."""
        return [path for path, _ in self.calls]

    async def lookup(
        self, path: str, *, credential: str | None = None
    ) -> RepositoryRecord:
        self.calls.append((path, credential))
        outcome = self.outcomes.get(path)
        if outcome is None:
            raise ProjectNotFoundError(path)
        if isinstance(outcome, ResolutionError):
            raise outcome
        return outcome

    async def aclose(self) -> None:
        self.closed = True


class RecordingLogger:
    """Collects femtologging-style log calls for assertions."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, str, object | None, bool]] = []

    def log(
        self,
        level: str,
        message: str,
        /,
        *,
        exc_info: object | None = None,
        stack_info: bool = False,
    ) -> str:
        self.calls.append((level, message, exc_info, stack_info))
        return message

    @property
    def messages(self) -> list[str]:
        """Return the logged messages, in call order."""
        return [message for _, message, _, _ in self.calls]
