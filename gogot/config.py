"""Process configuration for the gogot service.

Settings are read once at startup from ``GG_*`` environment variables and
may be overridden by command-line flags in :mod:`gogot.runtime`.

Usage
-----
>>> config = GogotConfig()
>>> config.listen
'127.0.0.1:9181'
>>> config.cache_size
512

"""

from __future__ import annotations

import dataclasses as dc
import os

from gogot.cache import DEFAULT_CAPACITY
from gogot.gitlab.client import DEFAULT_API_URL, GitLabClientConfig

__all__ = ["DEFAULT_LISTEN", "GogotConfig", "parse_listen"]

DEFAULT_LISTEN = "127.0.0.1:9181"

_MIN_PORT = 1
_MAX_PORT = 65535


def parse_listen(value: str) -> tuple[str, int]:
    """Split a ``host:port`` listen address.

    Bracketed IPv6 hosts are unwrapped.

    >>> parse_listen("127.0.0.1:9181")
    ('127.0.0.1', 9181)
    >>> parse_listen("[::1]:8080")
    ('::1', 8080)

    Raises
    ------
    ValueError
        If the host or port is missing, or the port is out of range.

    """
    host, sep, port_str = value.strip().rpartition(":")
    if not sep or not host or not port_str:
        msg = f"listen address must be host:port, got: {value!r}"
        raise ValueError(msg)
    if host.startswith("[") and host.endswith("]"):
        host = host[1:-1]
    try:
        port = int(port_str)
    except ValueError as exc:
        msg = f"listen port must be an integer, got: {port_str!r}"
        raise ValueError(msg) from exc
    if not (_MIN_PORT <= port <= _MAX_PORT):
        msg = f"listen port {port} outside valid range {_MIN_PORT}-{_MAX_PORT}"
        raise ValueError(msg)
    return (host, port)


@dc.dataclass(frozen=True, slots=True)
class GogotConfig:
    """Runtime settings for the import path service.

    Attributes
    ----------
    api_url
        Base URL of the GitLab REST API v4.
    listen
        ``host:port`` the HTTP server binds to.
    cache_size
        Capacity of the resolved-project cache.
    connect_timeout_s
        Connect timeout for GitLab API calls, in seconds.
    request_timeout_s
        Overall timeout for one GitLab API call, in seconds.
    log_level
        femtologging level name.

    """

    api_url: str = DEFAULT_API_URL
    listen: str = DEFAULT_LISTEN
    cache_size: int = DEFAULT_CAPACITY
    connect_timeout_s: float = 5.0
    request_timeout_s: float = 10.0
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        """Reject values the service cannot run with."""
        parse_listen(self.listen)
        if self.cache_size < 1:
            msg = f"cache size must be positive, got: {self.cache_size}"
            raise ValueError(msg)
        if self.connect_timeout_s <= 0 or self.request_timeout_s <= 0:
            msg = "timeouts must be positive"
            raise ValueError(msg)

    @property
    def host(self) -> str:
        """Return the bind host of :attr:`listen`."""
        return parse_listen(self.listen)[0]

    @property
    def port(self) -> int:
        """Return the bind port of :attr:`listen`."""
        return parse_listen(self.listen)[1]

    def client_config(self) -> GitLabClientConfig:
        """Return the GitLab client settings derived from this config."""
        return GitLabClientConfig(
            api_url=self.api_url,
            connect_timeout_s=self.connect_timeout_s,
            request_timeout_s=self.request_timeout_s,
        )

    @staticmethod
    def _read_str(env_var: str, default: str) -> str:
        raw = os.environ.get(env_var, "")
        return raw.strip() or default

    @staticmethod
    def _parse_positive_int(env_var: str, default: int) -> int:
        """Read a positive integer env var, falling back to a default."""
        raw = os.environ.get(env_var, "")
        if not raw.strip():
            return default
        try:
            value = int(raw)
        except ValueError as exc:
            msg = f"{env_var} must be an integer, got: {raw!r}"
            raise ValueError(msg) from exc
        if value < 1:
            msg = f"{env_var} must be positive, got: {value}"
            raise ValueError(msg)
        return value

    @staticmethod
    def _parse_positive_float(env_var: str, default: float) -> float:
        """Read a positive number of seconds, falling back to a default."""
        raw = os.environ.get(env_var, "")
        if not raw.strip():
            return default
        try:
            value = float(raw)
        except ValueError as exc:
            msg = f"{env_var} must be a number, got: {raw!r}"
            raise ValueError(msg) from exc
        if value <= 0:
            msg = f"{env_var} must be positive, got: {value}"
            raise ValueError(msg)
        return value

    @classmethod
    def from_env(cls) -> GogotConfig:
        """Create configuration from environment variables.

        Reads the following environment variables:

        - ``GG_GITLAB_API``: GitLab API base URL.
        - ``GG_LISTEN``: ``host:port`` to listen on.
        - ``GG_CACHE_SIZE``: Cache capacity. Must be a positive integer.
        - ``GG_CONNECT_TIMEOUT``: Connect timeout in seconds.
        - ``GG_REQUEST_TIMEOUT``: Overall GitLab request timeout in seconds.
        - ``GG_LOG_LEVEL``: Log level name.

        Raises
        ------
        ValueError
            If a numeric variable is malformed or not positive, or the
            listen address is invalid.

        """
        return cls(
            api_url=cls._read_str("GG_GITLAB_API", DEFAULT_API_URL),
            listen=cls._read_str("GG_LISTEN", DEFAULT_LISTEN),
            cache_size=cls._parse_positive_int("GG_CACHE_SIZE", DEFAULT_CAPACITY),
            connect_timeout_s=cls._parse_positive_float("GG_CONNECT_TIMEOUT", 5.0),
            request_timeout_s=cls._parse_positive_float("GG_REQUEST_TIMEOUT", 10.0),
            log_level=cls._read_str("GG_LOG_LEVEL", "INFO"),
        )
