from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Optional

from silencefinder.config.constants import (
    DEFAULT_SILENCE_THRESHOLD_DB,
    DEFAULT_MIN_SILENCE_DURATION,
    DEFAULT_CHANNEL_SEPARATION,
    DEFAULT_THROTTLE_LIMIT,
)
from silencefinder.config.run_mode import RunMode
from silencefinder.config.settings import AppSettings, settings as app_settings


@dataclass(frozen=True)
class DetectionConfig:
    """
    Immutable parameters for one detection run, shared read-only by all workers.

    Args:
        threshold_dbfs: Noise level (dBFS) below which audio counts as silence
        min_duration_sec: Minimum silence length in seconds
        channel_separation: Detect per channel instead of on the mixed signal
        serial: Process files one at a time
        throttle_limit: Maximum concurrent ffmpeg processes when not serial
    """
    threshold_dbfs: float = DEFAULT_SILENCE_THRESHOLD_DB
    min_duration_sec: float = DEFAULT_MIN_SILENCE_DURATION
    channel_separation: bool = DEFAULT_CHANNEL_SEPARATION
    serial: bool = False
    throttle_limit: int = DEFAULT_THROTTLE_LIMIT

    def __post_init__(self):
        if self.threshold_dbfs > 0:
            raise ValueError(f"threshold must be 0 or negative dBFS, got {self.threshold_dbfs}")
        if self.min_duration_sec <= 0:
            raise ValueError(f"minimum silence duration must be positive, got {self.min_duration_sec}")
        if self.throttle_limit < 1:
            raise ValueError(f"throttle limit must be at least 1, got {self.throttle_limit}")

    @property
    def run_mode(self) -> RunMode:
        return RunMode.SERIAL if self.serial else RunMode.PARALLEL

    @property
    def mono_flag(self) -> int:
        """Value of the silencedetect `mono` option: 1 for the mixed signal, 0 per channel."""
        return 0 if self.channel_separation else 1

    def with_overrides(self, **overrides) -> DetectionConfig:
        """Return a copy with the given non-None fields replaced."""
        changes = {key: value for key, value in overrides.items() if value is not None}
        return replace(self, **changes)

    @classmethod
    def from_settings(cls, source: Optional[AppSettings] = None, **overrides) -> DetectionConfig:
        """
        Build a configuration from application settings.
        Keyword overrides that are None fall back to the settings value.
        """
        source = source or app_settings
        base = cls(
            threshold_dbfs=source.SILENCE_THRESHOLD_DB,
            min_duration_sec=source.MIN_SILENCE_DURATION,
            channel_separation=source.CHANNEL_SEPARATION,
            serial=source.SERIAL,
            throttle_limit=source.THROTTLE_LIMIT,
        )
        return base.with_overrides(**overrides)
