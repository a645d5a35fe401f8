"""Data-only fork use case — copy a project's current files into a new repository."""

from __future__ import annotations

import asyncio
import logging

from repo_provisioner.domain.entities import METADATA_FILE, PROJECT_DATA_FILE, ForkResult
from repo_provisioner.domain.ports.remote_repository import RemoteRepository
from repo_provisioner.domain.value_objects import RepoLocator
from repo_provisioner.services.key_material import new_key_pair
from repo_provisioner.services.metadata_codec import (
    build_metadata,
    decode_json,
    decode_metadata,
    encode_metadata,
)
from repo_provisioner.services.naming import suffixed_name

logger = logging.getLogger(__name__)


class ForkRepoUseCase:
    """Forks *source* by content only; history is not carried over.

    The project data is written exactly as read from the source.  Any
    failure aborts the operation; a repository created before the failure
    is not deleted.
    """

    def __init__(
        self,
        remote: RemoteRepository,
        locator: RepoLocator,
        default_theme: str = "default",
    ) -> None:
        self._remote = remote
        self._locator = locator
        self._default_theme = default_theme

    async def execute(self, source: str) -> ForkResult:
        org = self._locator.org
        logger.info("Forking %s/%s (data only)", org, source)

        project_file = await self._remote.read_file(org, source, PROJECT_DATA_FILE)
        meta_file = await self._remote.read_file(org, source, METADATA_FILE)
        project_data = decode_json(project_file.content)
        source_meta = decode_metadata(meta_file.content, self._default_theme)

        new_name = suffixed_name(source)
        keys = new_key_pair()
        fork_meta = build_metadata(
            keys.digest,
            source_meta.theme,
            forked_from=self._locator.html_url(source),
        )

        repo = await self._remote.create_repository(
            org, new_name, description=f"Fork of {source}"
        )
        try:
            await asyncio.gather(
                self._remote.write_file(
                    repo.owner,
                    repo.name,
                    PROJECT_DATA_FILE,
                    project_file.content,
                    f"Add {PROJECT_DATA_FILE}",
                ),
                self._remote.write_file(
                    repo.owner,
                    repo.name,
                    METADATA_FILE,
                    encode_metadata(fork_meta),
                    f"Add {METADATA_FILE}",
                ),
            )
        except Exception:
            logger.warning("Fork %s/%s created but not fully seeded", repo.owner, repo.name)
            raise

        logger.info("Forked %s into %s", source, repo.name)
        return ForkResult(
            name=repo.name,
            url=repo.html_url,
            secret=keys.secret,
            project_data=project_data,
        )
