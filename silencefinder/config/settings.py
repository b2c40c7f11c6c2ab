from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

from silencefinder.config.constants import (
    DEFAULT_SILENCE_THRESHOLD_DB,
    DEFAULT_MIN_SILENCE_DURATION,
    DEFAULT_CHANNEL_SEPARATION,
    DEFAULT_THROTTLE_LIMIT,
)


class AppSettings(BaseSettings):
    """
    Centralized application settings.
    Reads from environment variables automatically.
    """
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # --- External tool ---
    FFMPEG_PATH: Optional[str] = None  # None means look up `ffmpeg` on PATH

    # --- Detection Settings ---
    SILENCE_THRESHOLD_DB: float = DEFAULT_SILENCE_THRESHOLD_DB
    MIN_SILENCE_DURATION: float = DEFAULT_MIN_SILENCE_DURATION
    CHANNEL_SEPARATION: bool = DEFAULT_CHANNEL_SEPARATION

    # --- Scheduling ---
    SERIAL: bool = False
    THROTTLE_LIMIT: int = DEFAULT_THROTTLE_LIMIT

    # --- Logging ---
    LOG_LEVEL: str = "INFO"


# Create a single, importable instance of the settings
settings = AppSettings()
