"""Provision-repository use case — create, seed and tag a project repository."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from repo_provisioner.domain.entities import (
    METADATA_FILE,
    PROJECT_DATA_FILE,
    ProvisionResult,
    RepositoryHandle,
)
from repo_provisioner.domain.exceptions import NameCollisionError
from repo_provisioner.domain.ports.remote_repository import RemoteRepository
from repo_provisioner.services.key_material import new_key_pair
from repo_provisioner.services.metadata_codec import (
    build_metadata,
    encode_metadata,
    encode_project_data,
)
from repo_provisioner.services.naming import suffixed_name
from repo_provisioner.services.topic_sanitizer import split_topics

logger = logging.getLogger(__name__)


class ProvisionRepoUseCase:
    """Creates a project repository in *org* and seeds it.

    The only retried failure is a name collision on creation, and only once:
    the second attempt uses the requested name plus a unique suffix.  Seed
    writes and topic tagging are single attempts; if they fail the created
    repository is left in place.
    """

    def __init__(self, remote: RemoteRepository, org: str) -> None:
        self._remote = remote
        self._org = org

    async def execute(
        self,
        name: str,
        project_data: Any,
        theme: str,
        description: str = "",
    ) -> ProvisionResult:
        repo = await self._create_with_rename(name, description)

        keys = new_key_pair()
        metadata = build_metadata(keys.digest, theme)
        try:
            await asyncio.gather(
                self._remote.write_file(
                    repo.owner,
                    repo.name,
                    PROJECT_DATA_FILE,
                    encode_project_data(project_data),
                    f"Add {PROJECT_DATA_FILE}",
                ),
                self._remote.write_file(
                    repo.owner,
                    repo.name,
                    METADATA_FILE,
                    encode_metadata(metadata),
                    f"Add {METADATA_FILE}",
                ),
            )

            topics = split_topics(theme)
            if topics:
                await self._remote.set_topics(repo.owner, repo.name, topics)
        except Exception:
            logger.warning("Repository %s/%s created but not fully seeded", repo.owner, repo.name)
            raise

        logger.info("Provisioned %s/%s", repo.owner, repo.name)
        return ProvisionResult(url=repo.html_url, name=repo.name, secret=keys.secret)

    async def _create_with_rename(self, name: str, description: str) -> RepositoryHandle:
        try:
            return await self._remote.create_repository(
                self._org, name, description=description
            )
        except NameCollisionError:
            renamed = suffixed_name(name)
            logger.warning("Repository name %r is taken, retrying as %r", name, renamed)

        return await self._remote.create_repository(self._org, renamed, description=description)
