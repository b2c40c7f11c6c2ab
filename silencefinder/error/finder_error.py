from typing import Optional


class SilenceFinderError(Exception):
    """Base class for all SilenceFinder failures."""


class ToolNotFoundError(SilenceFinderError):
    """ffmpeg is missing from PATH or not executable. Aborts the whole run."""

    def __init__(self, tool: str, message: Optional[str] = None):
        self.tool = tool
        super().__init__(message or f"Required tool `{tool}` was not found on PATH")


class PathResolutionError(SilenceFinderError):
    """An input expression resolved to no readable file."""

    def __init__(self, expression: str, message: Optional[str] = None):
        self.expression = expression
        super().__init__(message or f"No readable file matches: {expression}")


class InvocationError(SilenceFinderError):
    """ffmpeg could not analyze one specific file."""

    def __init__(self, file_path: str, message: str):
        self.file_path = file_path
        super().__init__(f"{file_path}: {message}")
