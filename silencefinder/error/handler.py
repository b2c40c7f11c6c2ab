from typing import Optional

from fastapi import HTTPException

from silencefinder.error.finder_error import SilenceFinderError, ToolNotFoundError, InvocationError
from silencefinder.io.file_service import cleanup_temp_file


def _status_code_for(e: SilenceFinderError) -> int:
    if isinstance(e, ToolNotFoundError):
        return 503
    if isinstance(e, InvocationError):
        return 422
    return 500


def handle_finder_error(e: SilenceFinderError, uploaded_path: Optional[str]) -> None:
    """
    Cleanup uploaded temp and raise HTTPException mapped from SilenceFinderError.
    """
    cleanup_temp_file(uploaded_path)
    raise HTTPException(status_code=_status_code_for(e), detail=str(e)) from e
