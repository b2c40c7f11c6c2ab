from __future__ import annotations

import logging
import re
from enum import Enum
from typing import Iterable, Iterator, List, Optional

from silencefinder.audio.silence_record import SilenceRecord
from silencefinder.audio.time_format import truncate_2dp, format_hms

logger = logging.getLogger(__name__)

# ffmpeg silencedetect log lines, e.g.
#   [silencedetect @ 0x55d0c8] silence_start: 3.024
#   [silencedetect @ 0x55d0c8] silence_end: 4.512 | silence_duration: 1.488
_NUMBER = r"(-?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?)"
SILENCE_START_PATTERN = re.compile(rf"(?<!\w)silence_start:\s*{_NUMBER}\s*$")
SILENCE_END_PATTERN = re.compile(
    rf"(?<!\w)silence_end:\s*{_NUMBER}\s*\|\s*silence_duration:\s*{_NUMBER}\s*$"
)


class ParserState(str, Enum):
    IDLE = "idle"
    OPEN = "open"


class SilenceLogParser:
    """
    Turns one file's ffmpeg log stream into silence records.

    A start line opens an interval, the next end line closes it and emits a record.
    A second start before an end replaces the pending one without emitting anything,
    and an interval still open when the stream ends is dropped. Other lines are ignored.
    """

    def __init__(self, file_name: str):
        self.file_name = file_name
        self.pending_start: Optional[float] = None
        self.pending_start_hms: Optional[str] = None

    @property
    def state(self) -> ParserState:
        return ParserState.IDLE if self.pending_start is None else ParserState.OPEN

    def reset(self) -> None:
        self.pending_start = None
        self.pending_start_hms = None

    def feed(self, line: str) -> Optional[SilenceRecord]:
        """Consume one line; return a record when it closes an open interval."""
        start_match = SILENCE_START_PATTERN.search(line)
        if start_match:
            if self.pending_start is not None:
                logger.debug(f"{self.file_name}: silence_start at {self.pending_start} replaced before its end")
            self.pending_start = truncate_2dp(start_match.group(1))
            self.pending_start_hms = format_hms(self.pending_start)
            return None

        end_match = SILENCE_END_PATTERN.search(line)
        if not end_match:
            return None

        if self.pending_start is None:
            logger.debug(f"{self.file_name}: silence_end without a matching start, skipping")
            return None

        end_sec = truncate_2dp(end_match.group(1))
        record = SilenceRecord(
            file_name=self.file_name,
            start_sec=self.pending_start,
            end_sec=end_sec,
            duration_sec=truncate_2dp(end_match.group(2)),
            start_hms=self.pending_start_hms,
            end_hms=format_hms(end_sec),
        )
        self.reset()
        return record

    def parse(self, lines: Iterable[str]) -> Iterator[SilenceRecord]:
        """Lazily parse a whole stream, starting from a fresh state."""
        self.reset()
        for line in lines:
            record = self.feed(line)
            if record is not None:
                yield record

        if self.pending_start is not None:
            logger.debug(f"{self.file_name}: stream ended inside a silence starting at {self.pending_start}, dropped")
            self.reset()


def parse_silence_log(file_name: str, lines: Iterable[str]) -> List[SilenceRecord]:
    """Parse a complete log into a list of records."""
    return list(SilenceLogParser(file_name).parse(lines))
