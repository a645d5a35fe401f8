"""Pytest configuration and shared fixtures.

This module provides fixtures used across the test suite:
- A mocked remote repository client
- Organization / URL locator defaults
- Helpers for building remote file payloads
"""

from __future__ import annotations

import json
from collections.abc import Callable
from typing import Any
from unittest.mock import AsyncMock

import pytest

from repo_provisioner.domain.entities import RemoteFile, RepositoryHandle
from repo_provisioner.domain.value_objects import RepoLocator

ORG = "test-org"


# =============================================================================
# Remote client fixtures
# =============================================================================


@pytest.fixture
def org() -> str:
    return ORG


@pytest.fixture
def locator() -> RepoLocator:
    """Locator without a token, as used for provenance URLs."""
    return RepoLocator(org=ORG, web_url="https://github.com")


@pytest.fixture
def remote() -> AsyncMock:
    """Create a mock RemoteRepository.

    ``create_repository`` echoes the requested name back as the platform
    would for a valid name.
    """
    mock = AsyncMock()

    async def _create(org: str, name: str, **kwargs: Any) -> RepositoryHandle:
        return RepositoryHandle(
            owner=org, name=name, html_url=f"https://github.com/{org}/{name}"
        )

    mock.create_repository.side_effect = _create
    return mock


@pytest.fixture
def make_file() -> Callable[..., RemoteFile]:
    """Build a RemoteFile from a JSON-able document or raw text."""

    def _make(path: str, document: Any, sha: str = "sha-1") -> RemoteFile:
        content = document if isinstance(document, str) else json.dumps(document)
        return RemoteFile(path=path, content=content, sha=sha)

    return _make


def pytest_configure(config: pytest.Config) -> None:
    """Configure custom pytest markers."""
    config.addinivalue_line("markers", "git: requires a git executable on PATH")
