from mutagen import File as MutagenFile, MutagenError


def get_audio_duration(file_path: str) -> float:
    """
    Get audio duration in seconds using mutagen.
    Returns 0.0 if detection fails.
    """
    try:
        audio_file = MutagenFile(file_path)
        if audio_file is None:
            return 0.0

        duration = getattr(audio_file.info, 'length', 0.0)
        return float(duration or 0.0)
    except (MutagenError, OSError, ValueError):
        return 0.0
