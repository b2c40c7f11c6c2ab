from __future__ import annotations

import logging
import os
import shlex
import shutil
import subprocess
import time
from collections import deque
from typing import Dict, Iterator, List, Optional

from silencefinder.audio.silence_parser import SilenceLogParser
from silencefinder.audio.silence_record import SilenceRecord
from silencefinder.config.constants import FFMPEG_BINARY, NO_COLOR_ENV_VAR, NO_COLOR_ENV_VALUE, OUTPUT_TAIL_LINES
from silencefinder.config.detection_config import DetectionConfig
from silencefinder.config.settings import settings
from silencefinder.error.finder_error import InvocationError, ToolNotFoundError
from silencefinder.io.file_service import is_readable_file

logger = logging.getLogger(__name__)


def ffmpeg_command_name(ffmpeg_path: Optional[str] = None) -> str:
    return ffmpeg_path or settings.FFMPEG_PATH or FFMPEG_BINARY


def resolve_ffmpeg(ffmpeg_path: Optional[str] = None) -> str:
    """
    Locate the ffmpeg executable, raising ToolNotFoundError if it cannot be run.
    """
    command_name = ffmpeg_command_name(ffmpeg_path)
    resolved = shutil.which(command_name)
    if resolved is None:
        raise ToolNotFoundError(command_name)
    return resolved


def build_silencedetect_filter(config: DetectionConfig) -> str:
    """
    Build the silencedetect filter expression.
    mono=1 analyzes the mixed signal, mono=0 analyzes each channel on its own.
    """
    return (
        f"silencedetect=noise={config.threshold_dbfs}dB"
        f":duration={config.min_duration_sec}"
        f":mono={config.mono_flag}"
    )


def build_silencedetect_command(file_path: str, config: DetectionConfig, ffmpeg_path: str = FFMPEG_BINARY) -> List[str]:
    """
    Build an FFmpeg command that runs silencedetect and discards the decoded audio.
    Only the diagnostic log matters, so the output goes to the null muxer.
    """
    return [
        ffmpeg_path,
        "-hide_banner",
        "-nostats",
        "-i",
        file_path,
        "-af",
        build_silencedetect_filter(config),
        "-f",
        "null",
        "-",
    ]


def build_tool_env() -> Dict[str, str]:
    """
    Environment for the ffmpeg child process with colored logging turned off.
    The current process environment is copied, never modified.
    """
    env = dict(os.environ)
    env[NO_COLOR_ENV_VAR] = NO_COLOR_ENV_VALUE
    return env


def _stream_command(command: List[str], file_path: str) -> Iterator[str]:
    """
    Run a command and yield its merged stdout/stderr line by line while it runs.
    Raises InvocationError with the tail of the output when the exit status is non-zero.
    """
    logger.debug(f"Executing command: {shlex.join(command)}")
    try:
        proc = subprocess.Popen(
            command,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
            errors="replace",
            env=build_tool_env(),
        )
    except FileNotFoundError as e:
        raise ToolNotFoundError(command[0]) from e
    except PermissionError as e:
        raise ToolNotFoundError(command[0], f"Tool `{command[0]}` is not executable") from e

    tail = deque(maxlen=OUTPUT_TAIL_LINES)
    try:
        for line in proc.stdout:
            tail.append(line.rstrip())
            yield line
        return_code = proc.wait()
    finally:
        # Reached early when the consumer stops iterating
        if proc.poll() is None:
            proc.kill()
        proc.stdout.close()
        proc.wait()

    if return_code != 0:
        output = "\n".join(line for line in tail if line)
        logger.error(f"Command failed: {shlex.join(command)}")
        logger.error(f"Error output: {output}")
        raise InvocationError(file_path, f"`{os.path.basename(command[0])}` exited with status {return_code}: {output}")


def analyze_file(file_path: str, config: DetectionConfig, ffmpeg_path: Optional[str] = None) -> Iterator[SilenceRecord]:
    """
    Detect silence in one file, yielding records as ffmpeg reports them.

    Args:
        file_path: Path to the audio (or video) file
        config: Detection parameters
        ffmpeg_path: ffmpeg executable, defaults to settings or `ffmpeg` on PATH

    Raises:
        InvocationError: the file is unreadable or ffmpeg failed to analyze it
        ToolNotFoundError: ffmpeg could not be started
    """
    if not is_readable_file(file_path):
        raise InvocationError(file_path, "not a readable file")

    file_name = os.path.basename(file_path)
    command = build_silencedetect_command(file_path, config, ffmpeg_command_name(ffmpeg_path))

    logger.info(
        f"Detecting silence: {file_name} (threshold={config.threshold_dbfs}dB, "
        f"duration={config.min_duration_sec}s, channel_separation={config.channel_separation})")

    started = time.monotonic()
    found = 0
    parser = SilenceLogParser(file_name)
    lines = _stream_command(command, file_path)
    try:
        for record in parser.parse(lines):
            found += 1
            yield record
    finally:
        lines.close()

    logger.info(f"Silence detection completed: {file_name} | {found} interval(s) in {time.monotonic() - started:.1f}s")
