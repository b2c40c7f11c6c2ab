"""Application constants."""

APP_NAME = "SilenceFinder"

# External tool
FFMPEG_BINARY = "ffmpeg"
NO_COLOR_ENV_VAR = "AV_LOG_FORCE_NOCOLOR"
NO_COLOR_ENV_VALUE = "1"

# Detection defaults
DEFAULT_SILENCE_THRESHOLD_DB = -60.0  # dBFS
DEFAULT_MIN_SILENCE_DURATION = 1.0  # seconds
DEFAULT_CHANNEL_SEPARATION = False
DEFAULT_THROTTLE_LIMIT = 5

# Lines of ffmpeg output kept for error messages
OUTPUT_TAIL_LINES = 10

# Export
CSV_ENCODING = "utf-8-sig"  # BOM for spreadsheet compatibility
CSV_HEADER = ["FileName", "Start", "End", "Duration", "StartHms", "EndHms"]
DEFAULT_AUDIO_NAME = "audio"
