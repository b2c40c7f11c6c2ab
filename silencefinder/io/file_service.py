from __future__ import annotations

import glob
import logging
import os
import tempfile
from pathlib import Path
from typing import Iterable, List, Optional, Tuple

import aiofiles
from fastapi import UploadFile

from silencefinder.audio.analyzer import get_audio_duration
from silencefinder.error.finder_error import PathResolutionError

logger = logging.getLogger(__name__)

_GLOB_CHARS = ("*", "?", "[")


def is_readable_file(file_path: str) -> bool:
    return os.path.isfile(file_path) and os.access(file_path, os.R_OK)


def resolve_expression(expression: str) -> List[str]:
    """
    Expand one path or glob pattern (recursive `**` supported) into readable files.
    Raises PathResolutionError when nothing readable matches.
    """
    if any(char in expression for char in _GLOB_CHARS):
        candidates = sorted(glob.glob(os.path.expanduser(expression), recursive=True))
    else:
        candidates = [os.path.expanduser(expression)]

    if len(candidates) == 1 and os.path.isdir(candidates[0]):
        raise PathResolutionError(expression, f"Path is a directory, not a file: {expression}")

    files = [os.path.abspath(path) for path in candidates if is_readable_file(path)]
    if not files:
        raise PathResolutionError(expression)
    return files


def resolve_input_paths(expressions: Iterable[str]) -> Tuple[List[str], List[PathResolutionError]]:
    """
    Resolve every expression independently; a failing one does not affect the others.
    Returns (files, errors) with duplicate files removed, first occurrence kept.
    """
    files: List[str] = []
    seen = set()
    errors: List[PathResolutionError] = []

    for expression in expressions:
        try:
            resolved = resolve_expression(expression)
        except PathResolutionError as e:
            logger.error(str(e))
            errors.append(e)
            continue

        for path in resolved:
            if path not in seen:
                seen.add(path)
                files.append(path)

    return files, errors


def _create_temp_file(suffix: str = "") -> str:
    """
    Create a temporary file synchronously and return its path.
    """
    with tempfile.NamedTemporaryFile(delete=False, suffix=suffix) as tmp:
        return tmp.name


def safe_suffix_from_filename(filename: Optional[str]) -> str:
    """
    Build a safe suffix for a temporary file based on the original filename's suffix.
    Returns an empty string if the filename has no extension.
    """
    try:
        if not filename:
            return ""
        suffix = Path(filename).suffix  # includes a leading dot if any
        return suffix if suffix else ""
    except (TypeError, ValueError):
        return ""


async def save_upload_to_temp_async(upload: UploadFile) -> str:
    """
    Asynchronously save an UploadFile to a temporary file and return the file path.
    The original suffix is kept so ffmpeg can probe the container.
    """
    suffix = safe_suffix_from_filename(upload.filename or "")

    temp_path = _create_temp_file(suffix)

    await upload.seek(0)
    async with aiofiles.open(temp_path, 'wb') as out_file:
        content = await upload.read()
        await out_file.write(content)

    return temp_path


def cleanup_temp_file(file_path: Optional[str]) -> None:
    """
    Clean up a temporary file if it exists.
    """
    if file_path and os.path.exists(file_path):
        try:
            os.remove(file_path)
        except OSError as e:
            logger.warning(f"Could not remove temp file {file_path}: {e}")


def ensure_parent_dir(path: str) -> None:
    """
    Ensure the parent directory exists for the path.
    """
    parent = Path(path).parent
    parent.mkdir(parents=True, exist_ok=True)


def print_file_info(file_path: str) -> None:
    """Log file size and duration information."""
    if not os.path.exists(file_path):
        logger.warning(f"File not found: {file_path}")
        return

    file_size_mb = os.path.getsize(file_path) / (1024 * 1024)
    duration_sec = get_audio_duration(file_path)
    duration_min = duration_sec / 60

    logger.info(
        f"File: {os.path.basename(file_path)} | Size: {file_size_mb:.2f}MB | Duration: {duration_min:.2f}min ({duration_sec:.1f}s)")
