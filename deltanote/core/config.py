"""
Application configuration using Pydantic Settings.

Runtime settings (where the vault lives, how to log) come from environment
variables and ``.env``. Delta scheduling settings live in YAML, see
``typed_config_loader``.
"""

from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Vault
    vault_path: str = "~/vault"

    # Optional explicit path to a YAML file with a ``delta:`` section
    delta_config_path: Optional[str] = None

    # Environment
    environment: str = "development"
    log_level: str = "INFO"
    log_to_file: bool = False
    logs_dir: str = "logs"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
