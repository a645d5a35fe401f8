"""Domain entities — pure data structures with no external dependencies."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

PROJECT_DATA_FILE = "projectData.json"
METADATA_FILE = "metaData.json"


@dataclass(frozen=True, slots=True)
class RepositoryHandle:
    """A repository as returned by the platform after creation."""

    owner: str
    name: str
    html_url: str
    default_branch: str = "main"


@dataclass(frozen=True, slots=True)
class RemoteFile:
    """Decoded file content plus its revision marker (blob sha)."""

    path: str
    content: str
    sha: str


@dataclass(frozen=True, slots=True)
class Metadata:
    """The record stored in ``metaData.json`` next to the project data."""

    created_at: str
    theme: str
    hashed_key: str
    forked_from: str | None = None

    @property
    def is_fork(self) -> bool:
        return self.forked_from is not None


@dataclass(frozen=True, slots=True)
class KeyPair:
    """A plaintext secret and its one-way digest."""

    secret: str
    digest: str


@dataclass(frozen=True, slots=True)
class ProvisionResult:
    url: str
    name: str
    secret: str


@dataclass(frozen=True, slots=True)
class ForkResult:
    """Outcome of a data-only fork.

    ``project_data`` is the source document, unmodified, so callers can
    render the fork without reading it back.
    """

    name: str
    url: str
    secret: str
    project_data: Any


@dataclass(frozen=True, slots=True)
class HistoryForkResult:
    name: str
    url: str
    secret: str
    project_data: Any
    success: bool = True


@dataclass(frozen=True, slots=True)
class OpenPullRequest:
    """An open pull request with the project data found on its head branch."""

    pull_request: dict[str, Any]
    project_data: Any = None


@dataclass(frozen=True, slots=True)
class ProjectSnapshot:
    """Project data read from a repository, optionally at a given ref."""

    name: str
    project_data: Any
    ref: str | None = None
    sha: str | None = None
