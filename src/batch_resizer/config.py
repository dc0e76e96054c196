# src/batch_resizer/config.py
from __future__ import annotations

import os

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Defaults for a resize batch. Uses Pydantic v2 + pydantic-settings.

    - Reads RESIZER_* environment variables (and a local .env if present)
    - Ignores unknown env vars
    - Case-insensitive env keys
    - The CLI takes its argument defaults from here
    """

    model_config = SettingsConfigDict(
        env_prefix="RESIZER_",
        env_file=".env",
        extra="ignore",
        case_sensitive=False,
    )

    # --- Batch ----------------------------------------------------------------
    SCALE: float = 0.5
    # Upper bound on concurrently active units of work
    MAX_WORKERS: int = min(os.cpu_count() or 4, 8)

    # --- Output ---------------------------------------------------------------
    JPEG_QUALITY: int = 100
    RESAMPLE: str = "lanczos"  # nearest|bilinear|bicubic|lanczos
    OUTPUT_EXT: str = ".jpg"

    # --- Logging --------------------------------------------------------------
    LOG_LEVEL: str = "INFO"


settings = Settings()
