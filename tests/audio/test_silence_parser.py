import pytest

from silencefinder.audio.silence_parser import (
    ParserState,
    SilenceLogParser,
    SILENCE_END_PATTERN,
    SILENCE_START_PATTERN,
    parse_silence_log,
)
from silencefinder.audio.silence_record import SilenceRecord


def test_parses_well_formed_pairs_in_order():
    lines = [
        "Input #0, mp3, from 'talk.mp3':\n",
        "[silencedetect @ 0x7f8c] silence_start: 1.5\n",
        "[silencedetect @ 0x7f8c] silence_end: 3.25 | silence_duration: 1.75\n",
        "[silencedetect @ 0x7f8c] silence_start: 3661.129\n",
        "[silencedetect @ 0x7f8c] silence_end: 3663.5 | silence_duration: 2.371\n",
        "size=N/A time=01:02:00.00 bitrate=N/A speed= 812x\n",
    ]

    records = parse_silence_log("talk.mp3", lines)

    assert records == [
        SilenceRecord("talk.mp3", 1.5, 3.25, 1.75, "0:00:01", "0:00:03"),
        SilenceRecord("talk.mp3", 3661.12, 3663.5, 2.37, "1:01:01", "1:01:03"),
    ]
    assert all(record.start_sec <= record.end_sec for record in records)


def test_dangling_start_is_dropped():
    lines = [
        "[silencedetect @ 0x1] silence_start: 1\n",
        "[silencedetect @ 0x1] silence_end: 2 | silence_duration: 1\n",
        "[silencedetect @ 0x1] silence_start: 9.87\n",
    ]
    parser = SilenceLogParser("clip.wav")

    records = list(parser.parse(lines))

    assert len(records) == 1
    assert parser.state == ParserState.IDLE
    assert parser.pending_start is None


def test_second_start_replaces_pending_start():
    lines = [
        "silence_start: 1.0\n",
        "silence_start: 4.0\n",
        "silence_end: 6.0 | silence_duration: 2.0\n",
    ]

    records = parse_silence_log("clip.wav", lines)

    assert len(records) == 1
    assert records[0].start_sec == 4.0
    assert records[0].end_sec == 6.0


def test_end_without_start_is_ignored():
    records = parse_silence_log("clip.wav", ["silence_end: 6.0 | silence_duration: 2.0\n"])
    assert records == []


def test_feed_tracks_state():
    parser = SilenceLogParser("clip.wav")
    assert parser.state == ParserState.IDLE

    assert parser.feed("[silencedetect @ 0x1] silence_start: 12.349") is None
    assert parser.state == ParserState.OPEN
    assert parser.pending_start == 12.34
    assert parser.pending_start_hms == "0:00:12"

    record = parser.feed("[silencedetect @ 0x1] silence_end: 14.999 | silence_duration: 2.65")
    assert record == SilenceRecord("clip.wav", 12.34, 14.99, 2.65, "0:00:12", "0:00:14")
    assert parser.state == ParserState.IDLE


def test_parse_restarts_from_fresh_state():
    parser = SilenceLogParser("clip.wav")
    parser.feed("silence_start: 1.0")

    records = list(parser.parse(["silence_end: 2.0 | silence_duration: 1.0"]))

    assert records == []


def test_no_silence_yields_no_records():
    assert parse_silence_log("clip.wav", ["Stream #0:0: Audio: pcm_s16le\n", "\n"]) == []


@pytest.mark.parametrize("line, expected", [
    ("[silencedetect @ 0x55d0] silence_start: 3.024", "3.024"),
    ("silence_start: 0", "0"),
    ("silence_start:12.5   \n", "12.5"),
    ("silence_start: .5", ".5"),
    ("silence_start: -0.00133", "-0.00133"),
    ("silence_start: 2.08333e-05", "2.08333e-05"),
    ("silence_start: 1E+02", "1E+02"),
    ("[silencedetect @ 0x1] channel: 1 | silence_start: 7.25", "7.25"),
])
def test_start_pattern_accepts(line, expected):
    match = SILENCE_START_PATTERN.search(line)
    assert match is not None
    assert match.group(1) == expected


@pytest.mark.parametrize("line", [
    "silence_start: abc",
    "silence_start: 1.2.3",
    "silence_start: 12.5s",
    "silence_start: 1e-",
    "my_silence_start: 3.0",
    "silence_start: 3.0 extra",
])
def test_start_pattern_rejects(line):
    assert SILENCE_START_PATTERN.search(line) is None


@pytest.mark.parametrize("line", [
    "silence_end: 4.512 | silence_duration: 1.488",
    "[silencedetect @ 0x55d0] silence_end: 4.512 | silence_duration: 1.488 \r\n",
    "silence_end:4.512|silence_duration:1.488",
])
def test_end_pattern_accepts(line):
    match = SILENCE_END_PATTERN.search(line)
    assert match is not None
    assert match.group(1) == "4.512"
    assert match.group(2) == "1.488"


@pytest.mark.parametrize("line", [
    "silence_end: 4.512",
    "silence_end: 4.512 | silence_duration: x",
    "silence_end: 4.512 / silence_duration: 1.488",
])
def test_end_pattern_rejects(line):
    assert SILENCE_END_PATTERN.search(line) is None


def test_exponent_timestamps_keep_the_interval():
    lines = [
        "[silencedetect @ 0x1] silence_start: 2.08333e-05\n",
        "[silencedetect @ 0x1] silence_end: 1.50002 | silence_duration: 1.5\n",
    ]

    records = parse_silence_log("clip.wav", lines)

    assert records == [SilenceRecord("clip.wav", 0.0, 1.5, 1.5, "0:00:00", "0:00:01")]
