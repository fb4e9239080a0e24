"""Configuration management for Compose Upgrader."""

import shlex
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from compose_upgrader.constants import DEFAULT_COMPOSE_COMMAND, DEFAULT_SETTLE_DELAY_SECONDS


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    The watched directories and compose filenames are fixed by the CLI
    contract and are deliberately not part of this model.
    """

    model_config = SettingsConfigDict(
        env_prefix="COMPOSE_UPGRADER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    environment: str = Field(default="production", description="Environment name")
    log_level: str = Field(default="INFO", description="Logging level")

    # Upgrade sequence
    settle_delay_seconds: float = Field(
        default=DEFAULT_SETTLE_DELAY_SECONDS,
        ge=0,
        description="Pause after the marker appears before checking for the next compose file",
    )
    compose_command: str = Field(
        default=DEFAULT_COMPOSE_COMMAND,
        description="Container orchestration CLI, e.g. 'docker-compose' or 'docker compose'",
    )

    # Build metadata (set during image build)
    build_time: str = Field(default="unknown", description="Build timestamp")
    git_commit: str = Field(default="unknown", description="Source revision")

    @field_validator("compose_command")
    @classmethod
    def _compose_command_not_blank(cls, value: str) -> str:
        if not shlex.split(value):
            raise ValueError("compose_command must not be empty")
        return value

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.environment.lower() == "development"

    @property
    def compose_argv(self) -> list[str]:
        """The compose command split into program and leading arguments."""
        return shlex.split(self.compose_command)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
