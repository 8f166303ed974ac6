from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """API settings loaded from ``RECONCILE_API_*`` environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="RECONCILE_API_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Server
    api_host: str = "127.0.0.1"
    api_port: int = 8000
    api_reload: bool = False
    log_level: str = "INFO"

    # When set, only directories inside this path may be reconciled.
    allowed_root: Path | None = None


settings = Settings()
