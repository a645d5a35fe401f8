"""History-preserving fork use case — clone, re-key, push to a new repository."""

from __future__ import annotations

import logging
from collections.abc import Callable

from repo_provisioner.domain.entities import (
    METADATA_FILE,
    PROJECT_DATA_FILE,
    HistoryForkResult,
)
from repo_provisioner.domain.ports.remote_repository import RemoteRepository
from repo_provisioner.domain.ports.workspace import LocalWorkspace
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

COMMIT_MESSAGE = "Update metaData.json with new hashedKey"


class ForkWithHistoryUseCase:
    """Forks *source* with its full commit history.

    The source is cloned into a scratch workspace, ``metaData.json`` is
    rewritten with a new key digest and provenance, and the result is pushed
    to a freshly created repository.  Exactly one commit is added on top of
    the source history.  The workspace is always removed; a remote
    repository created before a failure is not.
    """

    def __init__(
        self,
        remote: RemoteRepository,
        locator: RepoLocator,
        workspace_factory: Callable[[], LocalWorkspace],
        *,
        default_branch: str = "main",
        default_theme: str = "default",
        bot_name: str = "Musicblocks Bot",
        bot_email: str = "bot@musicblocks.org",
    ) -> None:
        self._remote = remote
        self._locator = locator
        self._workspace_factory = workspace_factory
        self._default_branch = default_branch
        self._default_theme = default_theme
        self._bot_name = bot_name
        self._bot_email = bot_email

    async def execute(self, source: str) -> HistoryForkResult:
        org = self._locator.org
        new_name = suffixed_name(source, marker="fork")
        logger.info("Forking %s/%s with history as %s", org, source, new_name)

        async with self._workspace_factory() as workspace:
            await workspace.clone(self._locator.git_url(source))

            repo = await self._remote.create_repository(
                org, new_name, description=f"Fork with history of {source}"
            )

            existing = workspace.read_file(METADATA_FILE)
            theme = (
                decode_metadata(existing, self._default_theme).theme
                if existing
                else self._default_theme
            )

            keys = new_key_pair()
            fork_meta = build_metadata(
                keys.digest, theme, forked_from=self._locator.html_url(source)
            )
            workspace.write_file(METADATA_FILE, encode_metadata(fork_meta, indent=2))

            project_text = workspace.read_file(PROJECT_DATA_FILE)
            project_data = decode_json(project_text) if project_text else {}

            await workspace.commit(
                [METADATA_FILE],
                COMMIT_MESSAGE,
                author_name=self._bot_name,
                author_email=self._bot_email,
            )
            await workspace.repoint_origin(self._locator.git_url(repo.name))
            try:
                await workspace.push(self._default_branch)
            except Exception:
                logger.warning("Repository %s/%s created but push failed", repo.owner, repo.name)
                raise

        logger.info("Forked %s with history into %s", source, repo.name)
        return HistoryForkResult(
            name=repo.name,
            url=repo.html_url,
            secret=keys.secret,
            project_data=project_data,
            success=True,
        )
