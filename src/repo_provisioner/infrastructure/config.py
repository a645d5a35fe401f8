"""Application configuration — loaded from environment variables."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Central configuration loaded from env vars (or ``.env`` file).

    Authentication uses the GitHub App installation flow when ``github_app_id``
    and ``github_installation_id`` are set, otherwise the static
    ``github_token``.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    github_org: str
    github_app_id: str | None = None
    github_installation_id: str | None = None
    github_private_key: SecretStr | None = None
    github_private_key_path: Path | None = None
    github_token: SecretStr | None = None
    github_api_url: str = "https://api.github.com"
    github_web_url: str = "https://github.com"

    default_branch: str = "main"
    default_theme: str = "default"
    repo_description: str = "Music Blocks project repository"
    bot_name: str = "Musicblocks Bot"
    bot_email: str = "bot@musicblocks.org"
    scratch_dir: Path | None = None

    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 8000

    @property
    def uses_github_app(self) -> bool:
        return bool(self.github_app_id and self.github_installation_id)

    def private_key(self) -> str:
        """Return the app private key (PEM), inline value first, then the file."""
        if self.github_private_key is not None:
            return self.github_private_key.get_secret_value()
        if self.github_private_key_path is not None:
            return self.github_private_key_path.read_text(encoding="utf-8")
        raise ValueError(
            "GITHUB_PRIVATE_KEY or GITHUB_PRIVATE_KEY_PATH must be set for GitHub App auth."
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the singleton application settings (cached after first call)."""
    return Settings()  # type: ignore[call-arg]
