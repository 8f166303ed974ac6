from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings loaded from ``TREE_RECONCILER_*`` environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="TREE_RECONCILER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    log_level: str = "INFO"


settings = Settings()
