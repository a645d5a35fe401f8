"""FastAPI dependency injection wiring."""

from __future__ import annotations

from dataclasses import dataclass

import httpx
from fastapi import Depends

from repo_provisioner.domain.ports.token_provider import TokenProvider
from repo_provisioner.domain.value_objects import RepoLocator
from repo_provisioner.infrastructure.config import Settings, get_settings
from repo_provisioner.infrastructure.git_workspace import GitWorkspace
from repo_provisioner.infrastructure.github_app_auth import (
    GitHubAppTokenProvider,
    StaticTokenProvider,
)
from repo_provisioner.infrastructure.github_rest_adapter import GitHubRestAdapter
from repo_provisioner.services.fork_repo import ForkRepoUseCase
from repo_provisioner.services.fork_with_history import ForkWithHistoryUseCase
from repo_provisioner.services.project_queries import ProjectQueries
from repo_provisioner.services.propose_upstream import ProposeUpstreamChangeUseCase
from repo_provisioner.services.provision_repo import ProvisionRepoUseCase

_http_client: httpx.AsyncClient | None = None
_token_provider: TokenProvider | None = None


async def startup() -> None:
    """Initialise shared resources — called from the lifespan context manager."""
    global _http_client, _token_provider  # noqa: PLW0603

    settings = get_settings()
    _http_client = httpx.AsyncClient(timeout=httpx.Timeout(30.0))
    _token_provider = build_token_provider(settings, _http_client)


async def shutdown() -> None:
    """Release shared resources."""
    global _http_client, _token_provider  # noqa: PLW0603

    if _http_client:
        await _http_client.aclose()
        _http_client = None
    _token_provider = None


def build_token_provider(settings: Settings, client: httpx.AsyncClient) -> TokenProvider:
    if settings.uses_github_app:
        return GitHubAppTokenProvider(
            client,
            app_id=settings.github_app_id or "",
            installation_id=settings.github_installation_id or "",
            private_key=settings.private_key(),
            api_url=settings.github_api_url,
        )
    if settings.github_token is None:
        raise ValueError("Configure GitHub App credentials or GITHUB_TOKEN.")
    return StaticTokenProvider(settings.github_token.get_secret_value())


def get_app_settings() -> Settings:
    """Settings as a dependency; every provider below receives it through ``Depends``."""
    return get_settings()


@dataclass(frozen=True, slots=True)
class RemoteSession:
    """Per-request authenticated client plus the URL builder bound to its token."""

    remote: GitHubRestAdapter
    locator: RepoLocator


async def get_session(settings: Settings = Depends(get_app_settings)) -> RemoteSession:
    """Authenticate and build a fresh client handle for this request."""
    assert _http_client is not None, "startup() was not called"
    assert _token_provider is not None, "startup() was not called"

    token = await _token_provider.get_token()
    return RemoteSession(
        remote=GitHubRestAdapter(
            client=_http_client, token=token, api_url=settings.github_api_url
        ),
        locator=RepoLocator(
            org=settings.github_org, web_url=settings.github_web_url, token=token
        ),
    )


def get_provision_use_case(
    session: RemoteSession = Depends(get_session),
) -> ProvisionRepoUseCase:
    return ProvisionRepoUseCase(remote=session.remote, org=session.locator.org)


def get_fork_use_case(
    session: RemoteSession = Depends(get_session),
    settings: Settings = Depends(get_app_settings),
) -> ForkRepoUseCase:
    return ForkRepoUseCase(
        remote=session.remote,
        locator=session.locator,
        default_theme=settings.default_theme,
    )


def get_fork_with_history_use_case(
    session: RemoteSession = Depends(get_session),
    settings: Settings = Depends(get_app_settings),
) -> ForkWithHistoryUseCase:
    return ForkWithHistoryUseCase(
        remote=session.remote,
        locator=session.locator,
        workspace_factory=lambda: GitWorkspace(base_dir=settings.scratch_dir),
        default_branch=settings.default_branch,
        default_theme=settings.default_theme,
        bot_name=settings.bot_name,
        bot_email=settings.bot_email,
    )


def get_propose_use_case(
    session: RemoteSession = Depends(get_session),
    settings: Settings = Depends(get_app_settings),
) -> ProposeUpstreamChangeUseCase:
    return ProposeUpstreamChangeUseCase(
        remote=session.remote,
        org=session.locator.org,
        default_branch=settings.default_branch,
    )


def get_queries(session: RemoteSession = Depends(get_session)) -> ProjectQueries:
    return ProjectQueries(remote=session.remote, org=session.locator.org)
