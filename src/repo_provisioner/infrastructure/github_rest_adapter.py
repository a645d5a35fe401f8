"""GitHub REST API adapter — implements the RemoteRepository port."""

from __future__ import annotations

import base64
import logging
from datetime import datetime, timezone
from typing import Any

import httpx

from repo_provisioner.domain.entities import RemoteFile, RepositoryHandle
from repo_provisioner.domain.exceptions import (
    NameCollisionError,
    RemoteError,
    RemoteNotFoundError,
    RemoteRateLimitError,
)

logger = logging.getLogger(__name__)

GITHUB_API = "https://api.github.com"
API_VERSION = "2022-11-28"


class GitHubRestAdapter:
    """Concrete RemoteRepository backed by the GitHub v3 REST API.

    One instance per inbound operation: the token is bound at construction,
    the underlying ``httpx.AsyncClient`` (connection pool) is shared.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        token: str | None = None,
        api_url: str = GITHUB_API,
    ) -> None:
        self._client = client
        self._api_url = api_url.rstrip("/")
        self._api_headers: dict[str, str] = {
            "Accept": "application/vnd.github+json",
            "User-Agent": "repo-provisioner/1.0",
            "X-GitHub-Api-Version": API_VERSION,
        }
        if token:
            self._api_headers["Authorization"] = f"Bearer {token}"

    # ── Repositories ────────────────────────────────────────────────────

    async def create_repository(
        self,
        org: str,
        name: str,
        *,
        description: str = "",
        private: bool = False,
        has_issues: bool = True,
        has_projects: bool = True,
        has_wiki: bool = True,
    ) -> RepositoryHandle:
        """POST /orgs/{org}/repos → RepositoryHandle."""
        resp = await self._api_request(
            "POST",
            f"/orgs/{org}/repos",
            json={
                "name": name,
                "description": description,
                "private": private,
                "has_issues": has_issues,
                "has_projects": has_projects,
                "has_wiki": has_wiki,
            },
        )
        data = resp.json()
        return RepositoryHandle(
            owner=(data.get("owner") or {}).get("login", org),
            name=data.get("name", name),
            html_url=data.get("html_url", ""),
            default_branch=data.get("default_branch") or "main",
        )

    async def list_repositories(
        self, org: str, page: int = 1, per_page: int = 50
    ) -> list[dict[str, Any]]:
        """GET /orgs/{org}/repos, newest first."""
        resp = await self._api_request(
            "GET",
            f"/orgs/{org}/repos",
            params={"direction": "desc", "per_page": str(per_page), "page": str(page)},
            # topics are only included with this preview media type
            headers={"Accept": "application/vnd.github.mercy-preview+json"},
        )
        return resp.json()

    async def set_topics(self, owner: str, repo: str, topics: list[str]) -> list[str]:
        """PUT /repos/{owner}/{repo}/topics → applied topic names."""
        resp = await self._api_request(
            "PUT", f"/repos/{owner}/{repo}/topics", json={"names": topics}
        )
        return resp.json().get("names", topics)

    async def list_commits(self, owner: str, repo: str) -> list[dict[str, Any]]:
        resp = await self._api_request("GET", f"/repos/{owner}/{repo}/commits")
        return resp.json()

    # ── Contents ────────────────────────────────────────────────────────

    async def read_file(
        self, owner: str, repo: str, path: str, ref: str | None = None
    ) -> RemoteFile:
        """GET /repos/{owner}/{repo}/contents/{path} → decoded RemoteFile."""
        params = {"ref": ref} if ref else None
        resp = await self._api_request(
            "GET", f"/repos/{owner}/{repo}/contents/{path}", params=params
        )
        data = resp.json()
        if isinstance(data, list) or "content" not in data:
            raise RemoteError(f"{path} in {owner}/{repo} is not a file.", resp.status_code)
        if data.get("encoding") == "none":
            # files over 1 MB come back without inline content
            data = await self._read_blob(owner, repo, data["sha"])
        # GitHub wraps the base64 payload at 60 columns
        content = base64.b64decode(data["content"]).decode("utf-8")
        return RemoteFile(path=path, content=content, sha=data["sha"])

    async def _read_blob(self, owner: str, repo: str, sha: str) -> dict[str, Any]:
        """GET /repos/{owner}/{repo}/git/blobs/{sha} (base64, up to 100 MB)."""
        resp = await self._api_request("GET", f"/repos/{owner}/{repo}/git/blobs/{sha}")
        return resp.json()

    async def write_file(
        self,
        owner: str,
        repo: str,
        path: str,
        content: str,
        message: str,
        *,
        sha: str | None = None,
        branch: str | None = None,
    ) -> dict[str, Any]:
        """PUT /repos/{owner}/{repo}/contents/{path}.

        *sha* must be the current blob sha when overwriting and omitted
        when creating; a stale sha is rejected by the platform.
        """
        payload: dict[str, Any] = {
            "message": message,
            "content": base64.b64encode(content.encode("utf-8")).decode("ascii"),
        }
        if sha:
            payload["sha"] = sha
        if branch:
            payload["branch"] = branch
        resp = await self._api_request(
            "PUT", f"/repos/{owner}/{repo}/contents/{path}", json=payload
        )
        return resp.json()

    # ── Refs & pull requests ────────────────────────────────────────────

    async def read_branch_tip(self, owner: str, repo: str, branch: str) -> str:
        """GET /repos/{owner}/{repo}/git/ref/heads/{branch} → commit sha."""
        resp = await self._api_request(
            "GET", f"/repos/{owner}/{repo}/git/ref/heads/{branch}"
        )
        return resp.json()["object"]["sha"]

    async def create_branch(
        self, owner: str, repo: str, name: str, from_sha: str
    ) -> dict[str, Any]:
        resp = await self._api_request(
            "POST",
            f"/repos/{owner}/{repo}/git/refs",
            json={"ref": f"refs/heads/{name}", "sha": from_sha},
        )
        return resp.json()

    async def create_pull_request(
        self, owner: str, repo: str, *, title: str, head: str, base: str, body: str
    ) -> dict[str, Any]:
        resp = await self._api_request(
            "POST",
            f"/repos/{owner}/{repo}/pulls",
            json={"title": title, "head": head, "base": base, "body": body},
        )
        return resp.json()

    async def list_open_pull_requests(self, owner: str, repo: str) -> list[dict[str, Any]]:
        resp = await self._api_request(
            "GET", f"/repos/{owner}/{repo}/pulls", params={"state": "open"}
        )
        return resp.json()

    # ── Transport ───────────────────────────────────────────────────────

    async def _api_request(
        self,
        method: str,
        endpoint: str,
        *,
        params: dict[str, str] | None = None,
        json: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        """Perform a GitHub API request with error translation."""
        url = f"{self._api_url}{endpoint}"
        try:
            resp = await self._client.request(
                method,
                url,
                headers={**self._api_headers, **(headers or {})},
                params=params,
                json=json,
            )
        except httpx.HTTPError as exc:
            raise RemoteError(f"Network error calling {method} {url}: {exc}") from exc

        if resp.is_success:
            return resp

        logger.debug("%s %s → HTTP %d", method, endpoint, resp.status_code)
        raise _translate_error(resp, method, endpoint)


def _error_body(resp: httpx.Response) -> tuple[str, list[dict[str, Any]]]:
    """Return the top-level message and the per-field error objects."""
    try:
        data = resp.json()
    except ValueError:
        return resp.text.strip() or resp.reason_phrase, []
    if not isinstance(data, dict):
        return str(data), []
    errors = [err for err in data.get("errors") or [] if isinstance(err, dict)]
    return str(data.get("message", resp.reason_phrase)), errors


def _is_name_collision(errors: list[dict[str, Any]]) -> bool:
    """True when a repository create was rejected because the name is taken."""
    return any(
        err.get("resource") == "Repository"
        and err.get("field") == "name"
        and "already exists" in str(err.get("message", "")).lower()
        for err in errors
    )


def _translate_error(resp: httpx.Response, method: str, endpoint: str) -> RemoteError:
    status = resp.status_code
    message, errors = _error_body(resp)
    details = [str(err.get("message") or err.get("code", "")) for err in errors]
    detail_text = "; ".join(d for d in details if d)
    full = f"GitHub API returned HTTP {status} for {method} {endpoint}: {message}"
    if detail_text:
        full = f"{full} ({detail_text})"

    if status == 422 and _is_name_collision(errors):
        return NameCollisionError(full, status)

    if status == 404:
        return RemoteNotFoundError(full, status)

    if status == 403 and resp.headers.get("x-ratelimit-remaining", "") == "0":
        reset_raw = resp.headers.get("x-ratelimit-reset", "")
        try:
            reset_str = datetime.fromtimestamp(int(reset_raw), tz=timezone.utc).strftime(
                "%Y-%m-%d %H:%M:%S UTC"
            )
        except (ValueError, OSError):
            reset_str = reset_raw or "unknown"
        return RemoteRateLimitError(
            f"GitHub API rate limit exceeded. Resets at {reset_str}.", status
        )

    if status == 429:
        return RemoteRateLimitError("GitHub API rate limit exceeded (HTTP 429).", status)

    return RemoteError(full, status)
