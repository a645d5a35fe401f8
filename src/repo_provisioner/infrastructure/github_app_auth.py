"""GitHub App authentication — implements the TokenProvider port.

An app JWT (RS256, signed with the app's private key) is exchanged for a
short-lived installation access token scoped to the organization.
"""

from __future__ import annotations

import logging
import time

import httpx
from jose import jwt

from repo_provisioner.domain.exceptions import TokenIssueError
from repo_provisioner.infrastructure.github_rest_adapter import API_VERSION, GITHUB_API

logger = logging.getLogger(__name__)

# GitHub rejects app JWTs that live longer than ten minutes
_JWT_TTL_SECONDS = 10 * 60
_CLOCK_DRIFT_SECONDS = 60


def generate_app_jwt(app_id: str, private_key: str, now: float | None = None) -> str:
    """Sign a GitHub App JWT with *private_key* (PEM)."""
    issued = int(now if now is not None else time.time())
    payload = {
        "iat": issued - _CLOCK_DRIFT_SECONDS,
        "exp": issued + _JWT_TTL_SECONDS,
        "iss": app_id,
    }
    return jwt.encode(payload, private_key, algorithm="RS256")


class GitHubAppTokenProvider:
    """Exchanges an app JWT for an installation token on every call."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        *,
        app_id: str,
        installation_id: str,
        private_key: str,
        api_url: str = GITHUB_API,
    ) -> None:
        self._client = client
        self._app_id = app_id
        self._installation_id = installation_id
        self._private_key = private_key
        self._api_url = api_url.rstrip("/")

    async def get_token(self) -> str:
        app_jwt = generate_app_jwt(self._app_id, self._private_key)
        url = f"{self._api_url}/app/installations/{self._installation_id}/access_tokens"
        try:
            resp = await self._client.post(
                url,
                headers={
                    "Authorization": f"Bearer {app_jwt}",
                    "Accept": "application/vnd.github+json",
                    "X-GitHub-Api-Version": API_VERSION,
                },
            )
        except httpx.HTTPError as exc:
            raise TokenIssueError(f"Network error requesting installation token: {exc}") from exc

        if not resp.is_success:
            raise TokenIssueError(
                f"Failed to get installation access token: {resp.status_code} {resp.text.strip()}"
            )

        token = resp.json().get("token")
        if not token:
            raise TokenIssueError("Installation token not found in response.")
        logger.debug("Issued installation token for installation %s", self._installation_id)
        return token


class StaticTokenProvider:
    """Returns a fixed token (personal access token or pre-issued installation token)."""

    def __init__(self, token: str) -> None:
        self._token = token

    async def get_token(self) -> str:
        return self._token
