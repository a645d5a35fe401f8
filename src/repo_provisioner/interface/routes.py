"""API routes — thin controllers that delegate to the use cases."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, Query

from repo_provisioner.infrastructure.config import Settings
from repo_provisioner.interface.dependencies import (
    get_app_settings,
    get_fork_use_case,
    get_fork_with_history_use_case,
    get_propose_use_case,
    get_provision_use_case,
    get_queries,
)
from repo_provisioner.interface.schemas import (
    ForkResponse,
    OpenPullRequestResponse,
    ProjectDataResponse,
    ProposeChangeRequest,
    ProposeChangeResponse,
    ProvisionRequest,
    ProvisionResponse,
)
from repo_provisioner.services.fork_repo import ForkRepoUseCase
from repo_provisioner.services.fork_with_history import ForkWithHistoryUseCase
from repo_provisioner.services.project_queries import ProjectQueries
from repo_provisioner.services.propose_upstream import ProposeUpstreamChangeUseCase
from repo_provisioner.services.provision_repo import ProvisionRepoUseCase

router = APIRouter(prefix="/projects", tags=["projects"])

_REMOTE_ERRORS: dict[int | str, dict[str, Any]] = {
    404: {"description": "Repository or file not found"},
    429: {"description": "GitHub API rate limit exceeded"},
    502: {"description": "GitHub API error"},
}


@router.post(
    "",
    response_model=ProvisionResponse,
    responses={409: {"description": "Repository name taken twice"}, **_REMOTE_ERRORS},
)
async def provision_project(
    body: ProvisionRequest,
    use_case: ProvisionRepoUseCase = Depends(get_provision_use_case),
    settings: Settings = Depends(get_app_settings),
) -> ProvisionResponse:
    """Create a project repository and return its one-time write key."""
    result = await use_case.execute(
        name=body.resolved_name(),
        project_data=body.project_data,
        theme=body.theme or settings.default_theme,
        description=body.description or settings.repo_description,
    )
    return ProvisionResponse(url=result.url, name=result.name, key=result.secret)


@router.get("", responses=_REMOTE_ERRORS)
async def list_projects(
    page: int = Query(1, ge=1),
    queries: ProjectQueries = Depends(get_queries),
) -> list[dict[str, Any]]:
    return await queries.list_projects(page)


@router.post("/{name}/fork", response_model=ForkResponse, responses=_REMOTE_ERRORS)
async def fork_project(
    name: str,
    use_case: ForkRepoUseCase = Depends(get_fork_use_case),
) -> ForkResponse:
    """Fork the project's current data into a new repository."""
    result = await use_case.execute(name)
    return ForkResponse(
        name=result.name, url=result.url, key=result.secret, project_data=result.project_data
    )


@router.post(
    "/{name}/fork-with-history",
    response_model=ForkResponse,
    responses={500: {"description": "Local git failure"}, **_REMOTE_ERRORS},
)
async def fork_project_with_history(
    name: str,
    use_case: ForkWithHistoryUseCase = Depends(get_fork_with_history_use_case),
) -> ForkResponse:
    """Fork the project with its full commit history."""
    result = await use_case.execute(name)
    return ForkResponse(
        success=result.success,
        name=result.name,
        url=result.url,
        key=result.secret,
        project_data=result.project_data,
    )


@router.get("/{name}/data", response_model=ProjectDataResponse, responses=_REMOTE_ERRORS)
async def read_project_data(
    name: str,
    ref: str | None = None,
    queries: ProjectQueries = Depends(get_queries),
) -> ProjectDataResponse:
    """Project data at the default branch, or at *ref* (branch or commit sha)."""
    snapshot = await queries.read_project_data(name, ref)
    return ProjectDataResponse(
        name=snapshot.name,
        ref=snapshot.ref,
        sha=snapshot.sha,
        project_data=snapshot.project_data,
    )


@router.get("/{name}/commits", responses=_REMOTE_ERRORS)
async def list_commits(
    name: str,
    queries: ProjectQueries = Depends(get_queries),
) -> list[dict[str, Any]]:
    return await queries.list_commits(name)


@router.get(
    "/{name}/pull-requests",
    response_model=list[OpenPullRequestResponse],
    responses=_REMOTE_ERRORS,
)
async def list_pull_requests(
    name: str,
    queries: ProjectQueries = Depends(get_queries),
) -> list[OpenPullRequestResponse]:
    results = await queries.list_open_pull_requests(name)
    return [
        OpenPullRequestResponse(pull_request=r.pull_request, project_data=r.project_data)
        for r in results
    ]


@router.post(
    "/{name}/pull-requests",
    response_model=ProposeChangeResponse,
    responses={422: {"description": "Repository is not a fork"}, **_REMOTE_ERRORS},
)
async def propose_upstream_change(
    name: str,
    body: ProposeChangeRequest,
    use_case: ProposeUpstreamChangeUseCase = Depends(get_propose_use_case),
) -> ProposeChangeResponse:
    """Open a pull request on the fork's upstream with the updated project data."""
    pr = await use_case.execute(name, body.project_data)
    return ProposeChangeResponse(pr_url=pr.get("html_url"), pull_request=pr)
