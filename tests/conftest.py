import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import List

import pytest

# Stand-in for ffmpeg: replays the "audio" file (a text file of log lines) on stderr.
FAKE_FFMPEG_SOURCE = '''
import os
import sys

args = sys.argv[1:]
calls_log = os.environ.get("FAKE_FFMPEG_CALLS")
if calls_log:
    with open(calls_log, "a") as log:
        log.write("\\t".join(args) + "\\n")

source = args[args.index("-i") + 1]
sys.stderr.write("nocolor=" + os.environ.get("AV_LOG_FORCE_NOCOLOR", "unset") + "\\n")
with open(source) as f:
    content = f.read()
sys.stderr.write(content)
sys.exit(1 if "Invalid data found" in content else 0)
'''

START_LINE = "[silencedetect @ 0x5581] silence_start: {start}\n"
END_LINE = "[silencedetect @ 0x5581] silence_end: {end} | silence_duration: {duration}\n"


@dataclass
class FakeFfmpeg:
    path: str
    calls_log: Path

    def calls(self) -> List[List[str]]:
        if not self.calls_log.exists():
            return []
        return [line.split("\t") for line in self.calls_log.read_text().splitlines()]


@pytest.fixture
def fake_ffmpeg(tmp_path, monkeypatch):
    if os.name == "nt":
        pytest.skip("fake ffmpeg relies on a shebang script")
    script = tmp_path / "bin" / "ffmpeg"
    script.parent.mkdir()
    script.write_text(f"#!{sys.executable}\n{FAKE_FFMPEG_SOURCE}")
    script.chmod(0o755)
    calls_log = tmp_path / "calls.log"
    monkeypatch.setenv("FAKE_FFMPEG_CALLS", str(calls_log))
    return FakeFfmpeg(path=str(script), calls_log=calls_log)


def silence_log(*intervals) -> str:
    """ffmpeg-like log text for (start, end, duration) tuples, with unrelated noise around it."""
    lines = ["Input #0, wav, from 'clip.wav':\n", "  Duration: 00:10:00.00, bitrate: 1536 kb/s\n"]
    for start, end, duration in intervals:
        lines.append(START_LINE.format(start=start))
        lines.append(END_LINE.format(end=end, duration=duration))
    lines.append("size=N/A time=00:10:00.00 bitrate=N/A speed= 900x\n")
    return "".join(lines)


@pytest.fixture
def make_audio(tmp_path):
    def _make(name: str, content: str) -> str:
        path = tmp_path / "audio" / name
        path.parent.mkdir(exist_ok=True)
        path.write_text(content)
        return str(path)
    return _make
