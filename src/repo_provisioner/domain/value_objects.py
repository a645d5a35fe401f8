"""Value objects — self-validating domain primitives."""

from __future__ import annotations

import re
from dataclasses import dataclass

from repo_provisioner.domain.exceptions import InvalidProvenanceUrlError

_REPO_URL_RE = re.compile(
    r"^https?://[^/\s]+/(?P<owner>[A-Za-z0-9\-_.]+)/(?P<repo>[A-Za-z0-9\-_.]+?)(?:\.git)?/?$"
)


@dataclass(frozen=True, slots=True)
class RepoUrl:
    """Validated repository URL as recorded in ``forkedFrom``.

    Extracts *owner* and *repo* from a URL like
    ``https://github.com/my-org/my-song``.  The host is not checked, so
    provenance recorded against a self-hosted instance still parses.
    """

    owner: str
    repo: str
    raw: str

    @classmethod
    def from_string(cls, url: str) -> RepoUrl:
        """Parse and validate a raw URL string."""
        url = url.strip()
        match = _REPO_URL_RE.match(url)
        if not match:
            raise InvalidProvenanceUrlError(
                f"Invalid forkedFrom URL in metadata: '{url}'. "
                "Expected format: https://<host>/<owner>/<repo>"
            )
        return cls(owner=match["owner"], repo=match["repo"], raw=url)

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repo}"


@dataclass(frozen=True, slots=True)
class RepoLocator:
    """Builds browse and git URLs for repositories of one organization.

    *token*, when set, is embedded in git URLs so ``git clone`` and
    ``git push`` can authenticate against private repositories.
    """

    org: str
    web_url: str = "https://github.com"
    token: str | None = None

    def html_url(self, name: str) -> str:
        return f"{self.web_url.rstrip('/')}/{self.org}/{name}"

    def git_url(self, name: str) -> str:
        base = self.web_url.rstrip("/")
        if self.token:
            scheme, _, host = base.partition("://")
            base = f"{scheme}://x-access-token:{self.token}@{host}"
        return f"{base}/{self.org}/{name}.git"
