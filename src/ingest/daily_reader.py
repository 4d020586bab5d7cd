"""Daily source reader for transaction CSV files.

This module scans the input directory, validates every row and keeps
the records dated on the target day. Unreadable files are skipped.
"""

from __future__ import annotations

import csv
import sys
from datetime import date
from pathlib import Path

from core.constants import INPUT_ENCODING, INPUT_FILE_PATTERN
from core.errors import DayLedgerIngestError
from core.logging_config import get_logger
from core.types import (
    DailyReadResult,
    FileReadFailure,
    FileReadOutcome,
    FileReadSuccess,
    RowAccepted,
    RowRejected,
    TransactionRecord,
)
from ingest.row_validator import validate_row

_LOGGER = get_logger(__name__)


def _raise_csv_field_limit() -> None:
    """Lift the csv module field size cap so long cells parse as data."""
    limit = sys.maxsize
    while True:
        try:
            csv.field_size_limit(limit)
            return
        except OverflowError:
            limit //= 10


_raise_csv_field_limit()


def read_daily_records(input_dir: Path, target_date: date) -> DailyReadResult:
    """Read valid records for one date across all input files.

    Args:
        input_dir: Directory containing source CSV files.
        target_date: Date to keep.

    Returns:
        Combined records in file order plus per-file outcomes.

    Raises:
        DayLedgerIngestError: If the input directory cannot be listed.
    """
    records: list[TransactionRecord] = []
    outcomes: list[FileReadOutcome] = []
    for file_path in list_input_files(input_dir):
        outcome = read_file_records(file_path, target_date)
        outcomes.append(outcome)
        if isinstance(outcome, FileReadSuccess):
            records.extend(outcome.records)
    return DailyReadResult(
        target_date=target_date,
        records=tuple(records),
        file_outcomes=tuple(outcomes),
    )


def list_input_files(input_dir: Path) -> list[Path]:
    """List CSV files directly under the input directory.

    Args:
        input_dir: Directory to scan, non-recursively.

    Returns:
        Matching file paths sorted by name.

    Raises:
        DayLedgerIngestError: If the directory is missing or unreadable.
    """
    if not input_dir.is_dir():
        raise DayLedgerIngestError(
            f"Failed to read input directory {input_dir}: not a directory. "
            "Create it or set DAYLEDGER_INPUT_DIR."
        )
    try:
        candidates = sorted(input_dir.glob(INPUT_FILE_PATTERN))
    except OSError as error:
        raise DayLedgerIngestError(
            f"Failed to list input directory {input_dir}: {error}."
        ) from error
    return [path for path in candidates if path.is_file()]


def read_file_records(file_path: Path, target_date: date) -> FileReadOutcome:
    """Read and validate all data rows of one input file.

    The first line is a header and is skipped. Rejected rows are logged
    with their raw content, except rows dated on another day.

    Args:
        file_path: Input CSV file.
        target_date: Date to keep.

    Returns:
        ``FileReadSuccess`` with accepted records and rejections, or
        ``FileReadFailure`` when the file cannot be opened or read.
    """
    source_file = file_path.name
    records: list[TransactionRecord] = []
    rejections: list[RowRejected] = []
    try:
        with file_path.open(encoding=INPUT_ENCODING, newline="") as handle:
            reader = csv.reader(handle)
            next(reader, None)
            for row in reader:
                outcome = validate_row(row, target_date, source_file)
                if isinstance(outcome, RowAccepted):
                    records.append(outcome.record)
                    continue
                rejections.append(outcome)
                _log_rejection(outcome, source_file, reader.line_num)
    except (OSError, UnicodeDecodeError, csv.Error) as error:
        _LOGGER.error("file_read_failed", source_file=str(file_path), cause=repr(error))
        return FileReadFailure(source_file=file_path, cause=repr(error))
    return FileReadSuccess(
        source_file=file_path,
        records=tuple(records),
        rejections=tuple(rejections),
    )


def _log_rejection(rejection: RowRejected, source_file: str, line_number: int) -> None:
    """Log a rejected row unless the rejection is expected."""
    if rejection.reason.is_silent:
        return
    _LOGGER.warning(
        "row_rejected",
        reason=rejection.reason.value,
        source_file=source_file,
        line_number=line_number,
        raw_row=list(rejection.raw_row),
    )
