"""Access logging for import path requests.

Every request produces exactly one ``request.completed`` line with the same
set of ``key=value`` fields, so log aggregators can parse them uniformly.
A request without a failure logs ``error=-`` and ``error_kind=-``.
"""

from __future__ import annotations

import dataclasses
import enum
import typing as typ
from http import HTTPStatus

from gogot.gitlab.errors import (
    GitLabAPIError,
    GitLabTransportError,
    ProjectNotFoundError,
)
from gogot.logging import get_logger, log_error, log_info
from gogot.render import RenderError

if typ.TYPE_CHECKING:
    import datetime as dt

__all__ = [
    "NO_ERROR_MARKER",
    "AccessLogRecord",
    "AccessLogger",
    "FailureKind",
    "RequestEventType",
    "categorize_failure",
]

logger = get_logger(__name__)

NO_ERROR_MARKER = "-"


class RequestEventType(enum.StrEnum):
    """Structured log event types for the HTTP surface."""

    REQUEST_COMPLETED = "request.completed"


class FailureKind(enum.StrEnum):
    """Classification of the first failure seen by a request."""

    NOT_FOUND = "not_found"
    BACKEND = "backend"
    TRANSPORT = "transport"
    RENDER = "render"
    UNKNOWN = "unknown"


_FAILURE_KIND_MAP: tuple[tuple[type[BaseException], FailureKind], ...] = (
    (ProjectNotFoundError, FailureKind.NOT_FOUND),
    (GitLabAPIError, FailureKind.BACKEND),
    (GitLabTransportError, FailureKind.TRANSPORT),
    (RenderError, FailureKind.RENDER),
)


def categorize_failure(exc: BaseException) -> FailureKind:
    """Return the failure kind used in access logs for ``exc``."""
    for exc_type, kind in _FAILURE_KIND_MAP:
        if isinstance(exc, exc_type):
            return kind
    return FailureKind.UNKNOWN


@dataclasses.dataclass(frozen=True, slots=True)
class AccessLogRecord:
    """Fields logged once per request.

    ``error`` is ``None`` when the request saw no failure. The record never
    carries the caller's ``Private-Token``.
    """

    remote: str
    method: str
    path: str
    elapsed: dt.timedelta
    status: int
    error: BaseException | None = None

    @property
    def error_text(self) -> str:
        """Return the error message, or the no-error marker."""
        if self.error is None:
            return NO_ERROR_MARKER
        return str(self.error) or type(self.error).__name__

    @property
    def error_kind(self) -> str:
        """Return the failure kind, or the no-error marker."""
        if self.error is None:
            return NO_ERROR_MARKER
        return categorize_failure(self.error).value


class _SupportsLog(typ.Protocol):
    def log(
        self,
        level: str,
        message: str,
        /,
        *,
        exc_info: object | None = None,
        stack_info: bool = False,
    ) -> str | None: ...


class AccessLogger:
    """Emit access-log lines via femtologging.

    Requests answered with a 5xx status are logged at ERROR, everything else
    at INFO.
    """

    def __init__(self, log: _SupportsLog | None = None) -> None:
        """Use ``log`` instead of the module logger when provided."""
        self._log = log

    def log_request(self, record: AccessLogRecord) -> None:
        """Log one completed request."""
        emit = (
            log_error
            if record.status >= HTTPStatus.INTERNAL_SERVER_ERROR
            else log_info
        )
        emit(
            self._log or logger,
            "[%s] remote=%s method=%s path=%s elapsed_seconds=%.6f status=%d "
            "error_kind=%s error=%s",
            RequestEventType.REQUEST_COMPLETED,
            record.remote,
            record.method,
            record.path,
            record.elapsed.total_seconds(),
            record.status,
            record.error_kind,
            record.error_text,
        )
