from __future__ import annotations

import csv
import logging
from typing import Iterable, TextIO

from silencefinder.audio.silence_record import SilenceRecord
from silencefinder.config.constants import CSV_ENCODING, CSV_HEADER
from silencefinder.io.file_service import ensure_parent_dir

logger = logging.getLogger(__name__)


def format_record(record: SilenceRecord) -> str:
    """One tab-separated console line per record."""
    return "\t".join(str(value) for value in record.as_row())


def print_records(records: Iterable[SilenceRecord], stream: TextIO) -> int:
    """Write records to a text stream as they arrive. Returns how many were written."""
    count = 0
    for record in records:
        stream.write(format_record(record) + "\n")
        stream.flush()
        count += 1
    return count


def write_csv(records: Iterable[SilenceRecord], csv_path: str) -> int:
    """
    Export records as CSV with a UTF-8 byte-order mark so spreadsheets detect the encoding.
    Returns the number of rows written.
    """
    ensure_parent_dir(csv_path)
    count = 0
    with open(csv_path, mode='w', newline='', encoding=CSV_ENCODING) as csv_file:
        csv_writer = csv.writer(csv_file)
        csv_writer.writerow(CSV_HEADER)
        for record in records:
            csv_writer.writerow(record.as_row())
            count += 1

    logger.info(f"Wrote {count} silence record(s) to {csv_path}")
    return count
