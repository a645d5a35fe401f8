"""Read-only project queries — listings and project data lookups."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from repo_provisioner.domain.entities import PROJECT_DATA_FILE, OpenPullRequest, ProjectSnapshot
from repo_provisioner.domain.exceptions import MissingProjectDataError, RemoteError
from repo_provisioner.domain.ports.remote_repository import RemoteRepository
from repo_provisioner.services.metadata_codec import decode_json

logger = logging.getLogger(__name__)


class ProjectQueries:
    """Queries against the organization's project repositories."""

    def __init__(self, remote: RemoteRepository, org: str) -> None:
        self._remote = remote
        self._org = org

    async def list_projects(self, page: int = 1) -> list[dict[str, Any]]:
        return await self._remote.list_repositories(self._org, page=page)

    async def list_commits(self, name: str) -> list[dict[str, Any]]:
        return await self._remote.list_commits(self._org, name)

    async def read_project_data(self, name: str, ref: str | None = None) -> ProjectSnapshot:
        """Return ``projectData.json`` at the default branch or at *ref*."""
        remote_file = await self._remote.read_file(self._org, name, PROJECT_DATA_FILE, ref=ref)
        return ProjectSnapshot(
            name=name,
            project_data=decode_json(remote_file.content),
            ref=ref,
            sha=remote_file.sha,
        )

    async def list_open_pull_requests(self, name: str) -> list[OpenPullRequest]:
        """Open pull requests, each with the project data on its head branch.

        Head branches are read concurrently.  A head that cannot be read
        (deleted branch, fork outside the organization, malformed file)
        yields ``project_data=None`` instead of failing the listing.
        """
        pull_requests = await self._remote.list_open_pull_requests(self._org, name)
        return list(
            await asyncio.gather(*(self._with_project_data(name, pr) for pr in pull_requests))
        )

    async def _with_project_data(self, name: str, pr: dict[str, Any]) -> OpenPullRequest:
        head_ref = (pr.get("head") or {}).get("ref")
        try:
            remote_file = await self._remote.read_file(
                self._org, name, PROJECT_DATA_FILE, ref=head_ref
            )
            project_data = decode_json(remote_file.content)
        except (RemoteError, MissingProjectDataError) as exc:
            logger.debug("No project data for PR #%s on %s: %s", pr.get("number"), name, exc)
            project_data = None
        return OpenPullRequest(pull_request=pr, project_data=project_data)
