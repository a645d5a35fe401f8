"""Local git workspace — implements the LocalWorkspace port with the git CLI."""

from __future__ import annotations

import asyncio
import logging
import re
import shutil
import subprocess
import tempfile
from pathlib import Path
from types import TracebackType

from repo_provisioner.domain.exceptions import LocalProcessError

logger = logging.getLogger(__name__)

_CREDENTIALS_RE = re.compile(r"(https?://)[^@/\s]+@")


def _redact(text: str) -> str:
    """Strip credentials embedded in remote URLs."""
    return _CREDENTIALS_RE.sub(r"\1***@", text)


class GitWorkspace:
    """Scratch clone in a uniquely named temporary directory.

    The directory is created on ``__aenter__`` and removed on ``__aexit__``
    regardless of how the block exits.
    """

    def __init__(self, base_dir: str | Path | None = None, git_binary: str = "git") -> None:
        self._base_dir = Path(base_dir) if base_dir else None
        self._git = git_binary
        self._path: Path | None = None

    @property
    def path(self) -> Path:
        if self._path is None:
            raise RuntimeError("GitWorkspace used outside its context")
        return self._path

    async def __aenter__(self) -> GitWorkspace:
        self._path = await asyncio.to_thread(self._make_scratch_dir)
        logger.debug("Created scratch workspace %s", self._path)
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        if self._path is not None:
            await asyncio.to_thread(shutil.rmtree, self._path, ignore_errors=True)
            logger.debug("Removed scratch workspace %s", self._path)
            self._path = None

    def _make_scratch_dir(self) -> Path:
        if self._base_dir is not None:
            self._base_dir.mkdir(parents=True, exist_ok=True)
        return Path(tempfile.mkdtemp(prefix="clone-", dir=self._base_dir))

    # ── Operations ──────────────────────────────────────────────────────

    async def clone(self, url: str) -> None:
        # clone into the (empty) workspace root itself
        await self._run_git(["clone", url, str(self.path)], in_workspace=False)

    def read_file(self, path: str) -> str | None:
        target = self.path / path
        if not target.is_file():
            return None
        return target.read_text(encoding="utf-8")

    def write_file(self, path: str, content: str) -> None:
        (self.path / path).write_text(content, encoding="utf-8")

    async def commit(
        self, paths: list[str], message: str, *, author_name: str, author_email: str
    ) -> None:
        await self._run_git(["config", "user.name", author_name])
        await self._run_git(["config", "user.email", author_email])
        await self._run_git(["add", "--", *paths])
        await self._run_git(["commit", "-m", message])

    async def repoint_origin(self, url: str) -> None:
        await self._run_git(["remote", "remove", "origin"])
        await self._run_git(["remote", "add", "origin", url])

    async def push(self, branch: str) -> None:
        await self._run_git(["push", "-u", "origin", branch])

    # ── Process plumbing ────────────────────────────────────────────────

    async def _run_git(self, args: list[str], *, in_workspace: bool = True) -> str:
        """Run git off the event loop; non-zero exit raises LocalProcessError."""
        command = [self._git, *args]
        try:
            result = await asyncio.to_thread(
                subprocess.run,
                command,
                cwd=self.path if in_workspace else None,
                capture_output=True,
                text=True,
                check=True,
            )
        except subprocess.CalledProcessError as exc:
            stderr = _redact((exc.stderr or "").strip())
            raise LocalProcessError(
                f"git {args[0]} failed with exit code {exc.returncode}: {stderr}",
                exc.returncode,
            ) from exc
        except OSError as exc:
            raise LocalProcessError(f"Could not run git {args[0]}: {exc}") from exc
        return result.stdout.strip()
