"""Application settings loaded from environment variables."""

from __future__ import annotations

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Vitaly health core configuration."""

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    # Logging
    vitaly_log_level: str = "info"

    # Reference ranges
    # Empty means the catalog bundled with the package
    # (vitaly/core/reference/data/health_reference_values.yaml).
    vitaly_reference_path: str = ""


def get_settings() -> Settings:
    """Create and return a Settings instance."""
    return Settings()
