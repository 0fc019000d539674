"""Application settings using Pydantic Settings for configuration management."""

from functools import lru_cache

from pydantic import SecretStr, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    # Application
    app_name: str = "issuebridge"
    app_version: str = "0.1.0"
    log_level: str = "INFO"

    # API Server
    listen_addr: str = "127.0.0.1:5000"

    # Suppress every outbound send and correlation write
    dry_run: bool = False

    # Correlation store
    correlation_db_path: str = "data/correlations.db"

    # GitHub (identity provider + tracker)
    github_token: SecretStr | None = None
    github_api_url: str = "https://api.github.com"
    github_owner: str = "usegalaxy.eu"
    github_repo: str = "issues"
    github_webhook_secret: SecretStr | None = None

    # Mailgun (email provider)
    mailgun_domain: str | None = None
    mailgun_api_key: SecretStr | None = None
    mailgun_api_url: str = "https://api.mailgun.net"
    mailgun_webhook_signing_key: SecretStr | None = None
    sender_address: str = "bugs@usegalaxy.eu"

    # Identity cache
    identity_cache_ttl_seconds: float = 24 * 60 * 60
    identity_cache_hard_expiry_seconds: float = 48 * 60 * 60

    # Outbound HTTP
    http_timeout_seconds: float = 30.0

    @computed_field
    @property
    def listen_host(self) -> str:
        """Host part of listen_addr."""
        host, _, _ = self.listen_addr.rpartition(":")
        return host or "127.0.0.1"

    @computed_field
    @property
    def listen_port(self) -> int:
        """Port part of listen_addr."""
        _, _, port = self.listen_addr.rpartition(":")
        return int(port)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
