"""Application settings powered by Pydantic BaseSettings."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """Centralized environment configuration."""

    model_config = SettingsConfigDict(
        env_prefix="", case_sensitive=False, env_file=".env", env_file_encoding="utf-8"
    )

    log_level: str = Field(default="INFO", validation_alias="NEWSDESK_LOG_LEVEL")
    json_logs: bool = Field(default=True, validation_alias="NEWSDESK_JSON_LOGS")
    seed: int | None = Field(default=None, validation_alias="NEWSDESK_SEED")

    def resolve_seed(self, override: int | None) -> int | None:
        """Return the explicit seed if given, else the environment seed."""
        return override if override is not None else self.seed


def get_settings() -> AppSettings:
    """Get a settings instance."""
    return AppSettings()
