"""Port: local repository workspace — the only seam that touches git processes."""

from __future__ import annotations

from types import TracebackType
from typing import Protocol


class LocalWorkspace(Protocol):
    """A scratch checkout that is removed when the context exits.

    Used as ``async with factory() as workspace``; the directory is gone
    after ``__aexit__`` whether or not the body raised.
    """

    async def __aenter__(self) -> LocalWorkspace:
        ...

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        ...

    async def clone(self, url: str) -> None:
        """Clone *url* with full history into the workspace."""
        ...

    def read_file(self, path: str) -> str | None:
        """Return the text of *path*, or ``None`` if it does not exist."""
        ...

    def write_file(self, path: str, content: str) -> None:
        ...

    async def commit(
        self, paths: list[str], message: str, *, author_name: str, author_email: str
    ) -> None:
        """Stage exactly *paths* and record one commit as the given identity."""
        ...

    async def repoint_origin(self, url: str) -> None:
        """Replace the ``origin`` remote with *url*."""
        ...

    async def push(self, branch: str) -> None:
        ...
