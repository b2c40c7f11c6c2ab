from __future__ import annotations

import asyncio
from typing import Annotated, Any, Dict, List

from fastapi import FastAPI, UploadFile, File, Query

from silencefinder.config.constants import DEFAULT_AUDIO_NAME
from silencefinder.config.detection_config import DetectionConfig
from silencefinder.config.logging_config import setup_logging
from silencefinder.config.settings import settings
from silencefinder.detector import analyze_file
from silencefinder.error.finder_error import SilenceFinderError
from silencefinder.error.handler import handle_finder_error
from silencefinder.io.file_service import save_upload_to_temp_async, cleanup_temp_file, print_file_info

app = FastAPI(
    title="SilenceFinder",
    description="Detect silence ranges in audio files with ffmpeg silencedetect",
    version="0.1.0",
)
setup_logging(settings.LOG_LEVEL)


@app.get("/")
async def root():
    return {"message": "Welcome to the SilenceFinder API"}


def _detect_uploaded(temp_path: str, file_name: str, config: DetectionConfig) -> List[Dict[str, Any]]:
    """Run detection on the saved upload and report records under the uploaded file's name."""
    print_file_info(temp_path)
    silences = []
    for record in analyze_file(temp_path, config):
        entry = record.as_dict()
        entry["file_name"] = file_name
        silences.append(entry)
    return silences


@app.post("/api/v1/silence/detect", summary="Detect silence ranges in an audio file")
async def detect_silence(
        file: UploadFile = File(...),

        threshold: Annotated[
            float,
            Query(description="Noise threshold in dBFS, `0` or negative", le=0)
        ] = settings.SILENCE_THRESHOLD_DB,

        min_duration: Annotated[
            float,
            Query(description="Minimum silence duration in seconds", gt=0)
        ] = settings.MIN_SILENCE_DURATION,

        channel_separation: Annotated[
            bool,
            Query(description="Detect silence on each channel separately")
        ] = settings.CHANNEL_SEPARATION,
):
    config = DetectionConfig(
        threshold_dbfs=threshold,
        min_duration_sec=min_duration,
        channel_separation=channel_separation,
        serial=True,
    )
    file_name = file.filename or DEFAULT_AUDIO_NAME
    temp_in_path = await save_upload_to_temp_async(file)

    try:
        silences = await asyncio.to_thread(_detect_uploaded, temp_in_path, file_name, config)
    except SilenceFinderError as e:
        handle_finder_error(e, temp_in_path)
    finally:
        cleanup_temp_file(temp_in_path)
        await file.close()

    return {
        "file_name": file_name,
        "threshold_dbfs": config.threshold_dbfs,
        "min_duration_sec": config.min_duration_sec,
        "channel_separation": config.channel_separation,
        "silences": silences,
    }
