"""GitLab project lookup client and its failure taxonomy."""

from __future__ import annotations

from .client import (
    DEFAULT_API_URL,
    GitLabClientConfig,
    GitLabProjectsClient,
    ProjectLookupClient,
    project_url,
)
from .errors import (
    GitLabAPIError,
    GitLabConfigError,
    GitLabTransportError,
    ProjectNotFoundError,
    ResolutionError,
)
from .models import GitLabProject, RepositoryRecord

__all__ = [
    "DEFAULT_API_URL",
    "GitLabAPIError",
    "GitLabClientConfig",
    "GitLabConfigError",
    "GitLabProject",
    "GitLabProjectsClient",
    "GitLabTransportError",
    "ProjectLookupClient",
    "ProjectNotFoundError",
    "RepositoryRecord",
    "ResolutionError",
    "project_url",
]
