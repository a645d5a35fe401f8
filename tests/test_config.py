"""Tests for settings and token-provider selection."""

from unittest.mock import MagicMock

import httpx
import pytest

from repo_provisioner.infrastructure.config import Settings
from repo_provisioner.infrastructure.github_app_auth import (
    GitHubAppTokenProvider,
    StaticTokenProvider,
)
from repo_provisioner.interface.dependencies import build_token_provider


def _settings(**overrides) -> Settings:
    values = {
        "github_org": "test-org",
        "github_app_id": None,
        "github_installation_id": None,
        "github_private_key": None,
        "github_private_key_path": None,
        "github_token": None,
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


class TestSettings:
    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("GITHUB_ORG", "sugarlabs")
        monkeypatch.setenv("DEFAULT_BRANCH", "trunk")

        settings = Settings(_env_file=None)

        assert settings.github_org == "sugarlabs"
        assert settings.default_branch == "trunk"
        assert settings.bot_name == "Musicblocks Bot"

    def test_app_flow_needs_both_ids(self):
        assert not _settings(github_app_id="1").uses_github_app
        assert _settings(github_app_id="1", github_installation_id="2").uses_github_app

    def test_private_key_inline_wins(self, tmp_path):
        key_file = tmp_path / "key.pem"
        key_file.write_text("from-file", encoding="utf-8")

        settings = _settings(github_private_key="inline", github_private_key_path=key_file)

        assert settings.private_key() == "inline"

    def test_private_key_from_file(self, tmp_path):
        key_file = tmp_path / "key.pem"
        key_file.write_text("from-file", encoding="utf-8")

        assert _settings(github_private_key_path=key_file).private_key() == "from-file"

    def test_private_key_missing(self):
        with pytest.raises(ValueError, match="GITHUB_PRIVATE_KEY"):
            _settings().private_key()


class TestTokenProviderSelection:
    def test_app_credentials_select_installation_flow(self):
        settings = _settings(
            github_app_id="1", github_installation_id="2", github_private_key="pem"
        )

        provider = build_token_provider(settings, MagicMock(spec=httpx.AsyncClient))

        assert isinstance(provider, GitHubAppTokenProvider)

    def test_static_token(self):
        client = MagicMock(spec=httpx.AsyncClient)

        provider = build_token_provider(_settings(github_token="pat"), client)

        assert isinstance(provider, StaticTokenProvider)

    def test_no_credentials(self):
        with pytest.raises(ValueError, match="GITHUB_TOKEN"):
            build_token_provider(_settings(), MagicMock(spec=httpx.AsyncClient))
