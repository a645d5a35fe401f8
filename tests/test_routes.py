"""HTTP surface tests with the use cases replaced by mocks."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from repo_provisioner.domain.entities import (
    ForkResult,
    HistoryForkResult,
    OpenPullRequest,
    ProjectSnapshot,
    ProvisionResult,
)
from repo_provisioner.domain.exceptions import (
    LocalProcessError,
    NameCollisionError,
    NotAForkError,
    RemoteNotFoundError,
    RemoteRateLimitError,
)
from repo_provisioner.domain.value_objects import RepoLocator
from repo_provisioner.infrastructure.config import Settings
from repo_provisioner.interface import dependencies
from repo_provisioner.interface.app import create_app


# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def use_cases():
    mocks = MagicMock()
    mocks.provision.execute = AsyncMock(
        return_value=ProvisionResult(url="https://github.com/test-org/song", name="song", secret="k")
    )
    mocks.fork.execute = AsyncMock(
        return_value=ForkResult(
            name="song-abc", url="https://github.com/test-org/song-abc", secret="k2",
            project_data={"a": 1},
        )
    )
    mocks.history.execute = AsyncMock(
        return_value=HistoryForkResult(
            name="song-fork-abc", url="https://github.com/test-org/song-fork-abc",
            secret="k3", project_data={},
        )
    )
    mocks.propose.execute = AsyncMock(
        return_value={"number": 7, "html_url": "https://github.com/org/base/pull/7"}
    )
    mocks.queries.list_projects = AsyncMock(return_value=[{"name": "song"}])
    mocks.queries.list_commits = AsyncMock(return_value=[{"sha": "a"}])
    mocks.queries.read_project_data = AsyncMock(
        return_value=ProjectSnapshot(name="song", project_data={"a": 1}, ref="abc", sha="s1")
    )
    mocks.queries.list_open_pull_requests = AsyncMock(
        return_value=[
            OpenPullRequest(pull_request={"number": 1}, project_data={"b": 2}),
            OpenPullRequest(pull_request={"number": 2}),
        ]
    )
    return mocks


@pytest.fixture
def client(use_cases):
    # Not used as a context manager: the lifespan (token provider, HTTP
    # client) stays down and every collaborator is overridden.
    app = create_app()
    overrides = {
        dependencies.get_app_settings: lambda: Settings(github_org="test-org", _env_file=None),
        dependencies.get_provision_use_case: lambda: use_cases.provision,
        dependencies.get_fork_use_case: lambda: use_cases.fork,
        dependencies.get_fork_with_history_use_case: lambda: use_cases.history,
        dependencies.get_propose_use_case: lambda: use_cases.propose,
        dependencies.get_queries: lambda: use_cases.queries,
    }
    app.dependency_overrides.update(overrides)
    return TestClient(app)


# ============================================================================
# Success paths
# ============================================================================


class TestProvisionEndpoint:
    def test_returns_key_once(self, client, use_cases):
        response = client.post(
            "/projects", json={"name": "song", "project_data": {"a": 1}, "theme": "piano"}
        )

        assert response.status_code == 200
        assert response.json() == {
            "success": True,
            "url": "https://github.com/test-org/song",
            "name": "song",
            "key": "k",
        }
        kwargs = use_cases.provision.execute.await_args.kwargs
        assert kwargs["theme"] == "piano"
        assert kwargs["project_data"] == {"a": 1}

    def test_blank_fields_fall_back_to_defaults(self, client, use_cases):
        client.post("/projects", json={"name": "  ", "theme": ""})

        kwargs = use_cases.provision.execute.await_args.kwargs
        assert kwargs["theme"] == "default"
        assert kwargs["project_data"] == {"1": "block", "2": "block"}
        assert kwargs["description"] == "Music Blocks project repository"
        assert kwargs["name"].startswith("20")


class TestForkEndpoints:
    def test_data_fork(self, client, use_cases):
        response = client.post("/projects/song/fork")

        assert response.status_code == 200
        assert response.json()["project_data"] == {"a": 1}
        use_cases.fork.execute.assert_awaited_once_with("song")

    def test_history_fork(self, client, use_cases):
        response = client.post("/projects/song/fork-with-history")

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["name"] == "song-fork-abc"
        assert body["key"] == "k3"


class TestPullRequestEndpoints:
    def test_propose(self, client, use_cases):
        response = client.post("/projects/fork-x/pull-requests", json={"project_data": {"n": 1}})

        assert response.status_code == 200
        assert response.json()["pr_url"] == "https://github.com/org/base/pull/7"
        use_cases.propose.execute.assert_awaited_once_with("fork-x", {"n": 1})

    def test_list_includes_unreadable_heads(self, client):
        response = client.get("/projects/song/pull-requests")

        assert response.json() == [
            {"pull_request": {"number": 1}, "project_data": {"b": 2}},
            {"pull_request": {"number": 2}, "project_data": None},
        ]


class TestQueryEndpoints:
    def test_list_projects_page(self, client, use_cases):
        response = client.get("/projects", params={"page": 3})

        assert response.json() == [{"name": "song"}]
        use_cases.queries.list_projects.assert_awaited_once_with(3)

    def test_invalid_page_rejected(self, client):
        assert client.get("/projects", params={"page": 0}).status_code == 422

    def test_project_data_at_ref(self, client, use_cases):
        response = client.get("/projects/song/data", params={"ref": "abc"})

        assert response.json()["sha"] == "s1"
        use_cases.queries.read_project_data.assert_awaited_once_with("song", "abc")

    def test_commits(self, client):
        assert client.get("/projects/song/commits").json() == [{"sha": "a"}]

    def test_health(self, client):
        assert client.get("/health").json() == {"status": "ok"}


# ============================================================================
# Error mapping
# ============================================================================


class TestErrorMapping:
    @pytest.mark.parametrize(
        ("error", "status_code"),
        [
            (NameCollisionError("name already exists", 422), 409),
            (RemoteNotFoundError("Not Found", 404), 404),
            (RemoteRateLimitError("rate limit exceeded", 403), 429),
            (LocalProcessError("git push failed with exit code 1"), 500),
        ],
    )
    def test_domain_errors(self, client, use_cases, error, status_code):
        use_cases.fork.execute.side_effect = error

        response = client.post("/projects/song/fork")

        assert response.status_code == status_code
        body = response.json()
        assert body["status"] == "error"
        assert body["message"].startswith("Could not complete operation: ")
        assert "success" not in body

    def test_not_a_fork(self, client, use_cases):
        use_cases.propose.execute.side_effect = NotAForkError("not a fork")

        response = client.post("/projects/song/pull-requests", json={"project_data": {}})

        assert response.status_code == 422

    @pytest.mark.parametrize("payload", [{}, {"project_data": None}])
    def test_missing_project_data(self, client, use_cases, payload):
        response = client.post("/projects/fork-x/pull-requests", json=payload)

        assert response.status_code == 422
        assert response.json()["status"] == "error"
        use_cases.propose.execute.assert_not_awaited()


# ============================================================================
# Settings injection
# ============================================================================


class TestSettingsInjection:
    def test_use_cases_receive_overridden_settings(self, make_file):
        remote = AsyncMock()
        remote.read_file.return_value = make_file(
            "metaData.json", {"createdAt": "x", "theme": "t", "hashedKey": "h"}
        )
        app = create_app()
        app.dependency_overrides[dependencies.get_app_settings] = lambda: Settings(
            github_org="test-org", default_branch="trunk", _env_file=None
        )
        app.dependency_overrides[dependencies.get_session] = lambda: dependencies.RemoteSession(
            remote=remote, locator=RepoLocator(org="test-org")
        )

        response = TestClient(app).post(
            "/projects/fork-x/pull-requests", json={"project_data": {}}
        )

        assert response.status_code == 422
        remote.read_file.assert_awaited_once_with(
            "test-org", "fork-x", "metaData.json", ref="trunk"
        )
