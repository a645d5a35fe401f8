"""Port: remote repository client — defined by the domain, implemented by infrastructure."""

from __future__ import annotations

from typing import Any, Protocol

from repo_provisioner.domain.entities import RemoteFile, RepositoryHandle


class RemoteRepository(Protocol):
    """Abstract contract for the hosted git platform.

    Every write is a real mutation on the platform and is never rolled back
    by the implementation.  Failures are raised as ``RemoteError`` or one of
    its subclasses.
    """

    async def create_repository(
        self,
        org: str,
        name: str,
        *,
        description: str = "",
        private: bool = False,
        has_issues: bool = True,
        has_projects: bool = True,
        has_wiki: bool = True,
    ) -> RepositoryHandle:
        """Create a repository inside *org*."""
        ...

    async def read_file(
        self, owner: str, repo: str, path: str, ref: str | None = None
    ) -> RemoteFile:
        """Return the decoded content and revision marker of a file."""
        ...

    async def write_file(
        self,
        owner: str,
        repo: str,
        path: str,
        content: str,
        message: str,
        *,
        sha: str | None = None,
        branch: str | None = None,
    ) -> dict[str, Any]:
        """Create a file, or overwrite it when *sha* is the current revision."""
        ...

    async def create_branch(
        self, owner: str, repo: str, name: str, from_sha: str
    ) -> dict[str, Any]:
        """Create ``refs/heads/<name>`` pointing at *from_sha*."""
        ...

    async def read_branch_tip(self, owner: str, repo: str, branch: str) -> str:
        """Return the commit sha at the tip of *branch*."""
        ...

    async def create_pull_request(
        self, owner: str, repo: str, *, title: str, head: str, base: str, body: str
    ) -> dict[str, Any]:
        ...

    async def set_topics(self, owner: str, repo: str, topics: list[str]) -> list[str]:
        ...

    async def list_repositories(
        self, org: str, page: int = 1, per_page: int = 50
    ) -> list[dict[str, Any]]:
        ...

    async def list_open_pull_requests(self, owner: str, repo: str) -> list[dict[str, Any]]:
        ...

    async def list_commits(self, owner: str, repo: str) -> list[dict[str, Any]]:
        ...
