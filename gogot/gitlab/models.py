"""Typed models for GitLab project lookups."""

from __future__ import annotations

import dataclasses
import urllib.parse

import msgspec


class GitLabProject(msgspec.Struct, kw_only=True):
    """Subset of the ``GET /projects/:id`` payload the service relies on."""

    path_with_namespace: str
    http_url_to_repo: str
    web_url: str


@dataclasses.dataclass(frozen=True, slots=True)
class RepositoryRecord:
    """Resolved GitLab project, as cached and rendered.

    Attributes
    ----------
    path_with_namespace
        Canonical ``group/subgroup/project`` identifier in GitLab.
    repo_url
        HTTP clone URL of the repository.
    web_url
        Browse URL of the project.

    """

    path_with_namespace: str
    repo_url: str
    web_url: str

    @property
    def host(self) -> str:
        """Return the network location of the clone URL.

        Any ``user:password@`` prefix is dropped and a port is kept. An empty
        string means the clone URL carries no host.
        """
        netloc = urllib.parse.urlsplit(self.repo_url).netloc
        return netloc.rpartition("@")[2]

    @classmethod
    def from_project(cls, project: GitLabProject) -> RepositoryRecord:
        """Build a record from a decoded GitLab project payload."""
        return cls(
            path_with_namespace=project.path_with_namespace,
            repo_url=project.http_url_to_repo,
            web_url=project.web_url,
        )
