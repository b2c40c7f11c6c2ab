from unittest.mock import patch

import pytest
from fastapi import HTTPException

from silencefinder.error.finder_error import (
    InvocationError,
    PathResolutionError,
    SilenceFinderError,
    ToolNotFoundError,
)
from silencefinder.error.handler import handle_finder_error


@pytest.mark.parametrize("error, status_code", [
    (ToolNotFoundError("ffmpeg"), 503),
    (InvocationError("/tmp/x.wav", "exited with status 1"), 422),
    (PathResolutionError("*.wav"), 500),
    (SilenceFinderError("boom"), 500),
])
@patch('silencefinder.error.handler.cleanup_temp_file')
def test_handle_finder_error_maps_status(mock_cleanup, error, status_code):
    with pytest.raises(HTTPException) as exc_info:
        handle_finder_error(error, "/tmp/upload.wav")

    assert exc_info.value.status_code == status_code
    assert exc_info.value.detail == str(error)
    mock_cleanup.assert_called_once_with("/tmp/upload.wav")


def test_error_messages():
    assert str(ToolNotFoundError("ffmpeg")) == "Required tool `ffmpeg` was not found on PATH"
    assert str(PathResolutionError("*.flac")) == "No readable file matches: *.flac"
    error = InvocationError("/data/a.wav", "not a readable file")
    assert error.file_path == "/data/a.wav"
    assert str(error) == "/data/a.wav: not a readable file"
    assert isinstance(error, SilenceFinderError)
