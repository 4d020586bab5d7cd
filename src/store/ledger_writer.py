"""Per-user ledger persistence.

This module groups accepted records by user id and appends each group
to ``<user_id>.csv``. The header row is written only when the ledger
is created, and a failing ledger never blocks the others.
"""

from __future__ import annotations

import csv
from decimal import Decimal
from pathlib import Path
from typing import Iterable

from core.constants import (
    LEDGER_ENCODING,
    LEDGER_FILE_SUFFIX,
    LEDGER_HEADER,
    LEDGER_LINE_TERMINATOR,
)
from core.errors import DayLedgerStoreError
from core.logging_config import get_logger
from core.types import PartitionWriteResult, TransactionRecord

_LOGGER = get_logger(__name__)


def write_user_partitions(
    records: Iterable[TransactionRecord],
    output_dir: Path,
) -> list[PartitionWriteResult]:
    """Append records to one ledger file per user.

    Args:
        records: Accepted records for the run.
        output_dir: Directory holding ledger files, created when absent.

    Returns:
        One result per user in first-seen order.
    """
    results: list[PartitionWriteResult] = []
    for user_id, user_records in group_by_user(records).items():
        try:
            results.append(append_user_ledger(user_id, user_records, output_dir))
        except DayLedgerStoreError as error:
            _LOGGER.error("partition_write_failed", user_id=user_id, cause=str(error))
            results.append(
                PartitionWriteResult(
                    user_id=user_id,
                    ledger_path=None,
                    rows_written=0,
                    header_written=False,
                    error=str(error),
                )
            )
    return results


def group_by_user(records: Iterable[TransactionRecord]) -> dict[str, list[TransactionRecord]]:
    """Group records by user id, keeping record order inside each group.

    Args:
        records: Records to partition.

    Returns:
        Mapping of user id to that user's records.
    """
    groups: dict[str, list[TransactionRecord]] = {}
    for record in records:
        groups.setdefault(record.user_id, []).append(record)
    return groups


def append_user_ledger(
    user_id: str,
    records: list[TransactionRecord],
    output_dir: Path,
) -> PartitionWriteResult:
    """Append one user's records to their ledger file.

    Args:
        user_id: Partition key naming the ledger file.
        records: That user's records.
        output_dir: Ledger directory.

    Returns:
        Write result for the partition.

    Raises:
        DayLedgerStoreError: If the user id cannot name a file, a row
            cannot be rendered, or the ledger cannot be written.
    """
    ledger_path = ledger_path_for(user_id, output_dir)
    try:
        rows = [ledger_row(record) for record in records]
    except (ArithmeticError, ValueError, MemoryError) as error:
        raise DayLedgerStoreError(
            f"Failed to render ledger rows for user '{user_id}': {error!r}."
        ) from error
    try:
        output_dir.mkdir(parents=True, exist_ok=True)
        needs_header = not ledger_path.exists() or ledger_path.stat().st_size == 0
        with ledger_path.open("a", encoding=LEDGER_ENCODING, newline="") as handle:
            writer = csv.writer(handle, lineterminator=LEDGER_LINE_TERMINATOR)
            if needs_header:
                writer.writerow(LEDGER_HEADER)
            writer.writerows(rows)
    except OSError as error:
        raise DayLedgerStoreError(
            f"Failed to write ledger {ledger_path} for user '{user_id}': {error}."
        ) from error
    return PartitionWriteResult(
        user_id=user_id,
        ledger_path=ledger_path,
        rows_written=len(records),
        header_written=needs_header,
    )


def ledger_path_for(user_id: str, output_dir: Path) -> Path:
    """Resolve the ledger file path for a user.

    Args:
        user_id: Partition key.
        output_dir: Ledger directory.

    Returns:
        ``output_dir / "<user_id>.csv"``.

    Raises:
        DayLedgerStoreError: If the user id is not a plain file name.
    """
    if user_id in (".", "..") or "/" in user_id or "\\" in user_id or "\x00" in user_id:
        raise DayLedgerStoreError(
            f"User id '{user_id}' cannot be used as a ledger file name."
        )
    return output_dir / f"{user_id}{LEDGER_FILE_SUFFIX}"


def ledger_row(record: TransactionRecord) -> list[str]:
    """Serialize a record in ledger column order."""
    return [
        record.transaction_id,
        record.date.isoformat(),
        format_amount(record.amount),
        record.description,
        record.source_file,
    ]


def format_amount(amount: Decimal) -> str:
    """Render an amount in plain notation, keeping its scale."""
    return format(amount, "f")
