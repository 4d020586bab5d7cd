"""Shared typed models.

This module defines immutable data models used by the row validator,
daily reader, ledger writer and pipeline orchestrator.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from pathlib import Path
from typing import Union


@dataclass(frozen=True)
class TransactionRecord:
    """Validated bank transaction bound for a user ledger.

    Attributes:
        transaction_id: Source transaction identifier, never empty.
        user_id: Ledger partition key, never empty.
        date: Calendar date of the transaction.
        amount: Exact decimal amount as given in the source.
        description: Free text, empty when the source omits it.
        source_file: Base name of the originating input file.
    """

    transaction_id: str
    user_id: str
    date: date
    amount: Decimal
    description: str
    source_file: str


class RejectionReason(Enum):
    """Why a raw row was excluded from the run."""

    MALFORMED_ROW = "malformed_row"
    INVALID_DATE = "invalid_date"
    DATE_MISMATCH = "date_mismatch"
    INVALID_AMOUNT = "invalid_amount"
    MISSING_IDENTIFIER = "missing_identifier"

    @property
    def is_silent(self) -> bool:
        """Return whether this rejection is expected and not logged."""
        return self is RejectionReason.DATE_MISMATCH


@dataclass(frozen=True)
class RowAccepted:
    """Row that passed validation."""

    record: TransactionRecord


@dataclass(frozen=True)
class RowRejected:
    """Row excluded from the run.

    Attributes:
        reason: First validation rule the row failed.
        raw_row: Row fields exactly as read from the file.
    """

    reason: RejectionReason
    raw_row: tuple[str, ...]


RowOutcome = Union[RowAccepted, RowRejected]


@dataclass(frozen=True)
class FileReadSuccess:
    """Input file that was read to the end.

    Attributes:
        source_file: Path of the input file.
        records: Accepted records in file order.
        rejections: Rejected rows in file order.
    """

    source_file: Path
    records: tuple[TransactionRecord, ...]
    rejections: tuple[RowRejected, ...]


@dataclass(frozen=True)
class FileReadFailure:
    """Input file skipped because it could not be opened or read.

    Attributes:
        source_file: Path of the input file.
        cause: Underlying error description.
    """

    source_file: Path
    cause: str


FileReadOutcome = Union[FileReadSuccess, FileReadFailure]


@dataclass(frozen=True)
class DailyReadResult:
    """Combined reader output for one target date.

    Attributes:
        target_date: Date the run filtered on.
        records: Accepted records across all files.
        file_outcomes: Per-file outcomes in processing order.
    """

    target_date: date
    records: tuple[TransactionRecord, ...]
    file_outcomes: tuple[FileReadOutcome, ...]

    @property
    def failed_files(self) -> tuple[FileReadFailure, ...]:
        """Return outcomes for files that could not be read."""
        return tuple(
            outcome for outcome in self.file_outcomes if isinstance(outcome, FileReadFailure)
        )

    def rejection_counts(self) -> dict[RejectionReason, int]:
        """Count rejected rows by reason across readable files."""
        counts: Counter[RejectionReason] = Counter()
        for outcome in self.file_outcomes:
            if isinstance(outcome, FileReadSuccess):
                counts.update(rejection.reason for rejection in outcome.rejections)
        return dict(counts)


@dataclass(frozen=True)
class PartitionWriteResult:
    """Outcome of appending one user's records to their ledger.

    Attributes:
        user_id: Partition key.
        ledger_path: Target ledger file.
        rows_written: Data rows appended.
        header_written: Whether the header row was written in this call.
        error: Failure description, ``None`` on success.
    """

    user_id: str
    ledger_path: Path | None
    rows_written: int
    header_written: bool
    error: str | None = None

    @property
    def succeeded(self) -> bool:
        """Return whether the partition was written."""
        return self.error is None


@dataclass(frozen=True)
class PipelineRunSummary:
    """Result of one pipeline execution.

    Attributes:
        target_date: Date the run filtered on.
        started_at: Local start timestamp.
        finished_at: Local end timestamp.
        matched_count: Records accepted by the reader.
        written_count: Rows appended across all ledgers.
        failed_files: Input files skipped as unreadable.
        failed_partitions: User ids whose ledger write failed.
        error: Run-level failure description, ``None`` when the run completed.
    """

    target_date: date
    started_at: datetime
    finished_at: datetime
    matched_count: int = 0
    written_count: int = 0
    failed_files: tuple[str, ...] = ()
    failed_partitions: tuple[str, ...] = ()
    error: str | None = None

    @property
    def succeeded(self) -> bool:
        """Return whether the run completed without a run-level failure."""
        return self.error is None
