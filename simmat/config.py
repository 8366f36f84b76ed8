"""Application configuration from environment variables."""

from __future__ import annotations

import logging

from pydantic_settings import BaseSettings

LOG_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"


class Settings(BaseSettings):
    simmat_env: str = "development"
    simmat_log_level: str = "info"

    # CORS
    cors_origins: list[str] = ["http://localhost:3000"]

    # Rendering
    cell_size: int = 2
    label_padding: int = 50
    label_full_names: bool = False
    output_extension: str = ".gif"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()


def configure_logging(level: str | None = None) -> None:
    """Root logging for the CLI and the service; unknown level names fall back to INFO."""
    name = (level or settings.simmat_log_level).upper()
    logging.basicConfig(level=getattr(logging, name, logging.INFO), format=LOG_FORMAT)
