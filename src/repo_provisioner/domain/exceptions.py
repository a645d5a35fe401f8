"""Domain exception hierarchy.

Each exception maps to a specific HTTP status code at the interface layer.
Inner layers raise these; the outermost error-handler translates them.
"""

from __future__ import annotations


class RepoProvisionerError(Exception):
    """Base exception for the entire application."""


# ── Remote platform errors ──────────────────────────────────────────────────


class RemoteError(RepoProvisionerError):
    """Non-2xx response (or transport failure) from the git platform."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class NameCollisionError(RemoteError):
    """A repository with the requested name already exists (422)."""


class RemoteNotFoundError(RemoteError):
    """The repository, file or ref does not exist (404)."""


class RemoteRateLimitError(RemoteError):
    """Platform rate limit exceeded (429 / 403 with rate-limit header)."""


class TokenIssueError(RepoProvisionerError):
    """Could not obtain an installation access token."""


# ── Preconditions ───────────────────────────────────────────────────────────


class PreconditionError(RepoProvisionerError):
    """Required input or derived state is missing."""


class NotAForkError(PreconditionError):
    """The repository metadata records no upstream (``forkedFrom``)."""


class InvalidProvenanceUrlError(PreconditionError):
    """The recorded ``forkedFrom`` URL does not name an owner/repo pair."""


class MissingProjectDataError(PreconditionError):
    """A repository file is absent or does not hold a JSON document."""


# ── Local process errors ────────────────────────────────────────────────────


class LocalProcessError(RepoProvisionerError):
    """A local ``git`` invocation exited non-zero."""

    def __init__(self, message: str, returncode: int | None = None) -> None:
        super().__init__(message)
        self.returncode = returncode
