"""Propose-upstream-change use case — open a pull request from a fork's data."""

from __future__ import annotations

import logging
from typing import Any

from repo_provisioner.domain.entities import METADATA_FILE, PROJECT_DATA_FILE
from repo_provisioner.domain.exceptions import NotAForkError, RemoteNotFoundError
from repo_provisioner.domain.ports.remote_repository import RemoteRepository
from repo_provisioner.domain.value_objects import RepoUrl
from repo_provisioner.services.metadata_codec import decode_metadata, encode_project_data
from repo_provisioner.services.naming import branch_name

logger = logging.getLogger(__name__)

PR_TITLE = "Update projectData.json from fork"


class ProposeUpstreamChangeUseCase:
    """Writes a fork's updated project data onto a new upstream branch and opens a PR.

    Steps run strictly in order: the branch exists before anything is
    written to it, and the pull request is opened only after the write
    succeeds.  A fork without recorded provenance fails before any remote
    write.
    """

    def __init__(self, remote: RemoteRepository, org: str, default_branch: str = "main") -> None:
        self._remote = remote
        self._org = org
        self._default_branch = default_branch

    async def execute(self, fork: str, updated_project_data: Any) -> dict[str, Any]:
        meta_file = await self._remote.read_file(
            self._org, fork, METADATA_FILE, ref=self._default_branch
        )
        metadata = decode_metadata(meta_file.content)
        if not metadata.forked_from:
            raise NotAForkError(
                f"{fork} is not a fork; cannot create a pull request to a base repository."
            )
        upstream = RepoUrl.from_string(metadata.forked_from)
        owner, repo = upstream.owner, upstream.repo

        tip = await self._remote.read_branch_tip(owner, repo, self._default_branch)
        branch = branch_name()
        await self._remote.create_branch(owner, repo, branch, tip)
        logger.info("Created branch %s on %s from %s", branch, upstream.full_name, tip[:7])

        sha: str | None = None
        try:
            existing = await self._remote.read_file(owner, repo, PROJECT_DATA_FILE, ref=branch)
            sha = existing.sha
        except RemoteNotFoundError:
            logger.debug("%s not on %s yet, creating it", PROJECT_DATA_FILE, branch)

        await self._remote.write_file(
            owner,
            repo,
            PROJECT_DATA_FILE,
            encode_project_data(updated_project_data),
            PR_TITLE,
            sha=sha,
            branch=branch,
        )

        pull_request = await self._remote.create_pull_request(
            owner,
            repo,
            title=PR_TITLE,
            head=branch,
            base=self._default_branch,
            body=f"Automated PR to update projectData.json from fork {fork}",
        )
        logger.info(
            "Opened pull request #%s on %s from %s",
            pull_request.get("number"),
            upstream.full_name,
            fork,
        )
        return pull_request
