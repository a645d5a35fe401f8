"""Pydantic request / response DTOs for the API boundary."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, Field, field_validator


def _default_project_data() -> dict[str, Any]:
    return {"1": "block", "2": "block"}


class ProvisionRequest(BaseModel):
    """Request body for ``POST /projects``.

    A blank name falls back to the current UTC timestamp, a blank theme to
    ``default``.
    """

    name: str | None = None
    project_data: Any = Field(default_factory=_default_project_data)
    theme: str | None = None
    description: str | None = None

    @field_validator("name", "theme", "description")
    @classmethod
    def _blank_is_missing(cls, v: str | None) -> str | None:
        if v is None:
            return None
        stripped = v.strip()
        return stripped or None

    @field_validator("project_data")
    @classmethod
    def _data_required(cls, v: Any) -> Any:
        return _default_project_data() if v is None else v

    def resolved_name(self) -> str:
        return self.name or datetime.now(timezone.utc).isoformat(timespec="milliseconds")


class ProvisionResponse(BaseModel):
    """Successful response from ``POST /projects``; ``key`` is shown only once."""

    success: bool = True
    url: str
    name: str
    key: str


class ForkResponse(BaseModel):
    success: bool = True
    name: str
    url: str
    key: str
    project_data: Any


class ProposeChangeRequest(BaseModel):
    """Request body for ``POST /projects/{name}/pull-requests``."""

    project_data: Any

    @field_validator("project_data")
    @classmethod
    def _must_be_present(cls, v: Any) -> Any:
        if v is None:
            msg = "project_data is required."
            raise ValueError(msg)
        return v


class ProposeChangeResponse(BaseModel):
    success: bool = True
    pr_url: str | None = None
    pull_request: dict[str, Any]


class ProjectDataResponse(BaseModel):
    success: bool = True
    name: str
    ref: str | None = None
    sha: str | None = None
    project_data: Any


class OpenPullRequestResponse(BaseModel):
    pull_request: dict[str, Any]
    project_data: Any = None


class ErrorResponse(BaseModel):
    """Standard error envelope returned on all failure paths."""

    status: str = "error"
    message: str
