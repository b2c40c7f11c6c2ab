from __future__ import annotations

import argparse
import logging
import sys
from typing import Iterable, Iterator, List, Optional, TextIO

from silencefinder.audio.silence_record import SilenceRecord
from silencefinder.config.detection_config import DetectionConfig
from silencefinder.config.logging_config import setup_logging
from silencefinder.config.settings import settings
from silencefinder.error.finder_error import ToolNotFoundError
from silencefinder.io.file_service import resolve_input_paths
from silencefinder.io.record_sink import format_record, print_records, write_csv
from silencefinder.scheduler import SilenceScheduler

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_PARTIAL_FAILURE = 1
EXIT_FATAL = 2


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """
    Parse command-line arguments. Unset options fall back to application settings.
    """
    parser = argparse.ArgumentParser(
        prog="silencefinder",
        description="Detect silence ranges in audio files with ffmpeg's silencedetect filter.",
    )
    parser.add_argument(
        'paths', nargs='+',
        help="Audio files or glob patterns (quote patterns such as '**/*.wav' to expand them here)."
    )
    parser.add_argument(
        '-t', '--threshold', dest='threshold_dbfs', type=float, default=None,
        help=f"Noise threshold in dBFS (default: {settings.SILENCE_THRESHOLD_DB})."
    )
    parser.add_argument(
        '-d', '--min-duration', dest='min_duration_sec', type=float, default=None,
        help=f"Minimum silence duration in seconds (default: {settings.MIN_SILENCE_DURATION})."
    )
    parser.add_argument(
        '-c', '--channel-separation', dest='channel_separation', action='store_true', default=None,
        help="Detect silence on each channel separately instead of the mixed signal."
    )
    parser.add_argument(
        '-s', '--serial', dest='serial', action='store_true', default=None,
        help="Process files one at a time in the given order."
    )
    parser.add_argument(
        '-j', '--throttle-limit', dest='throttle_limit', type=int, default=None,
        help=f"Maximum concurrent ffmpeg processes (default: {settings.THROTTLE_LIMIT})."
    )
    parser.add_argument(
        '-o', '--csv', dest='csv_path', default=None,
        help="Also export the records to this CSV file (UTF-8 with BOM)."
    )
    parser.add_argument(
        '--ffmpeg', dest='ffmpeg_path', default=None,
        help="ffmpeg executable to use (default: `ffmpeg` on PATH)."
    )
    parser.add_argument(
        '-v', '--verbose', dest='verbose', action='store_true',
        help="Enable debug logging."
    )
    return parser.parse_args(argv)


def _echo(records: Iterable[SilenceRecord], stream: TextIO) -> Iterator[SilenceRecord]:
    for record in records:
        stream.write(format_record(record) + "\n")
        stream.flush()
        yield record


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    setup_logging("DEBUG" if args.verbose else settings.LOG_LEVEL)

    try:
        config = DetectionConfig.from_settings(
            threshold_dbfs=args.threshold_dbfs,
            min_duration_sec=args.min_duration_sec,
            channel_separation=args.channel_separation,
            serial=args.serial,
            throttle_limit=args.throttle_limit,
        )
    except ValueError as e:
        logger.error(f"Invalid configuration: {e}")
        return EXIT_FATAL

    files, path_errors = resolve_input_paths(args.paths)
    scheduler = SilenceScheduler(config, ffmpeg_path=args.ffmpeg_path)

    try:
        records = scheduler.run(files)
        if args.csv_path:
            write_csv(_echo(records, sys.stdout), args.csv_path)
        else:
            print_records(records, sys.stdout)
    except ToolNotFoundError as e:
        logger.critical(str(e))
        return EXIT_FATAL

    if path_errors or scheduler.summary.failed:
        return EXIT_PARTIAL_FAILURE
    return EXIT_OK


if __name__ == '__main__':
    sys.exit(main())
