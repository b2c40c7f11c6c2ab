from __future__ import annotations

import logging
import queue
import threading
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterable, Iterator, List, Optional, Sequence

from silencefinder.audio.silence_record import SilenceRecord
from silencefinder.config.detection_config import DetectionConfig
from silencefinder.config.run_mode import RunMode
from silencefinder.detector import analyze_file, resolve_ffmpeg
from silencefinder.error.finder_error import InvocationError

logger = logging.getLogger(__name__)

Analyzer = Callable[[str, DetectionConfig, Optional[str]], Iterable[SilenceRecord]]
FailureCallback = Callable[[str, InvocationError], None]

# Messages sent from workers to the consuming generator
_RECORD = "record"
_SUCCEEDED = "succeeded"
_FAILED = "failed"
_FATAL = "fatal"
_WORKER_DONE = "worker_done"

RESULT_QUEUE_SLOTS_PER_WORKER = 2
_PUT_POLL_SECONDS = 0.1


def _put_until_stopped(results: queue.Queue, message: tuple, stop_event: threading.Event) -> bool:
    """
    Block until the message fits in the results queue or the consumer has gone away.
    Returns False when the run was stopped and the message was dropped.
    """
    while not stop_event.is_set():
        try:
            results.put(message, timeout=_PUT_POLL_SECONDS)
            return True
        except queue.Full:
            continue
    return False


@dataclass
class BatchSummary:
    succeeded: List[str] = field(default_factory=list)
    failed: Dict[str, str] = field(default_factory=dict)
    record_count: int = 0

    @property
    def processed_count(self) -> int:
        return len(self.succeeded) + len(self.failed)


class SilenceScheduler:
    """
    Runs silence detection over many files, serially or with a bounded pool of worker threads.

    In parallel mode records of one file keep their order, but records of different
    files interleave in whatever order the workers produce them.
    A file that fails is reported through the summary and `on_failure`; the rest continue.
    """

    def __init__(
            self,
            config: DetectionConfig,
            analyzer: Analyzer = analyze_file,
            ffmpeg_path: Optional[str] = None,
            on_failure: Optional[FailureCallback] = None,
    ):
        self.config = config
        self.analyzer = analyzer
        self.ffmpeg_path = ffmpeg_path
        self.on_failure = on_failure
        self.summary = BatchSummary()

    def run(self, files: Sequence[str]) -> Iterator[SilenceRecord]:
        """
        Verify ffmpeg is available, then return a lazy stream of records for all files.
        Raises ToolNotFoundError immediately, before any file is touched.
        """
        files = list(files)
        ffmpeg = resolve_ffmpeg(self.ffmpeg_path)
        self.summary = BatchSummary()

        logger.info(
            f"Scanning {len(files)} file(s) in {self.config.run_mode.value} mode"
            + ("" if self.config.serial else f" (throttle_limit={self.config.throttle_limit})"))

        if self.config.run_mode == RunMode.SERIAL:
            return self._run_serial(files, ffmpeg)
        return self._run_parallel(files, ffmpeg)

    def _record_success(self, file_path: str) -> None:
        self.summary.succeeded.append(file_path)

    def _record_failure(self, file_path: str, error: InvocationError) -> None:
        logger.warning(f"Skipping file after analysis failure: {error}")
        self.summary.failed[file_path] = str(error)
        if self.on_failure is not None:
            self.on_failure(file_path, error)

    def _log_summary(self) -> None:
        logger.info(
            f"Batch completed: {len(self.summary.succeeded)} succeeded, {len(self.summary.failed)} failed, "
            f"{self.summary.record_count} silence interval(s)")

    def _run_serial(self, files: List[str], ffmpeg: str) -> Iterator[SilenceRecord]:
        for file_path in files:
            try:
                for record in self.analyzer(file_path, self.config, ffmpeg):
                    self.summary.record_count += 1
                    yield record
            except InvocationError as e:
                self._record_failure(file_path, e)
            else:
                self._record_success(file_path)
        self._log_summary()

    def _run_parallel(self, files: List[str], ffmpeg: str) -> Iterator[SilenceRecord]:
        pending: queue.Queue = queue.Queue()
        for file_path in files:
            pending.put(file_path)

        # Bounded so workers wait for the consumer instead of buffering every record
        results: queue.Queue = queue.Queue(maxsize=self.config.throttle_limit * RESULT_QUEUE_SLOTS_PER_WORKER)
        stop_event = threading.Event()
        worker_count = min(self.config.throttle_limit, len(files))
        workers = [
            threading.Thread(
                target=self._work,
                args=(pending, results, stop_event, ffmpeg),
                name=f"silence-worker-{index}",
                daemon=True,
            )
            for index in range(worker_count)
        ]
        for worker in workers:
            worker.start()

        finished = 0
        try:
            while finished < worker_count:
                kind, payload = results.get()
                if kind == _RECORD:
                    self.summary.record_count += 1
                    yield payload
                elif kind == _SUCCEEDED:
                    self._record_success(payload)
                elif kind == _FAILED:
                    self._record_failure(*payload)
                elif kind == _FATAL:
                    raise payload
                elif kind == _WORKER_DONE:
                    finished += 1
        finally:
            # Also reached when the consumer closes the stream early
            stop_event.set()

        for worker in workers:
            worker.join()
        self._log_summary()

    def _work(self, pending: queue.Queue, results: queue.Queue, stop_event: threading.Event, ffmpeg: str) -> None:
        """Worker loop: take the next unstarted file until the queue is empty."""
        try:
            while not stop_event.is_set():
                try:
                    file_path = pending.get_nowait()
                except queue.Empty:
                    break
                self._analyze_into(file_path, results, stop_event, ffmpeg)
        finally:
            _put_until_stopped(results, (_WORKER_DONE, None), stop_event)

    def _analyze_into(self, file_path: str, results: queue.Queue, stop_event: threading.Event, ffmpeg: str) -> None:
        records = None
        try:
            records = iter(self.analyzer(file_path, self.config, ffmpeg))
            for record in records:
                if not _put_until_stopped(results, (_RECORD, record), stop_event):
                    return
        except InvocationError as e:
            _put_until_stopped(results, (_FAILED, (file_path, e)), stop_event)
        except Exception as e:
            # Forwarded to the consuming thread, which re-raises it
            _put_until_stopped(results, (_FATAL, e), stop_event)
        else:
            _put_until_stopped(results, (_SUCCEEDED, file_path), stop_event)
        finally:
            close = getattr(records, "close", None)
            if close is not None:
                close()


def detect_silences(
        files: Sequence[str],
        config: DetectionConfig,
        on_failure: Optional[FailureCallback] = None,
        ffmpeg_path: Optional[str] = None,
) -> Iterator[SilenceRecord]:
    """Convenience wrapper: stream records for all files with a fresh scheduler."""
    return SilenceScheduler(config, ffmpeg_path=ffmpeg_path, on_failure=on_failure).run(files)
