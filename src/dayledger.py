"""Public SDK surface for DayLedger.

This module provides a stable import path for library users.
It re-exports the pipeline entry points and typed models.
"""

from __future__ import annotations

from core.config import DayLedgerConfig, ensure_directories
from core.types import (
    DailyReadResult,
    PartitionWriteResult,
    PipelineRunSummary,
    RejectionReason,
    RowAccepted,
    RowRejected,
    TransactionRecord,
)
from ingest.daily_reader import read_daily_records
from ingest.pipeline import DailyPipelineRunner, run_daily_pipeline
from ingest.row_validator import validate_row
from scheduling.daily_scheduler import DailyScheduler, parse_run_time
from store.ledger_writer import write_user_partitions

__all__ = [
    "DailyPipelineRunner",
    "DailyReadResult",
    "DailyScheduler",
    "DayLedgerConfig",
    "PartitionWriteResult",
    "PipelineRunSummary",
    "RejectionReason",
    "RowAccepted",
    "RowRejected",
    "TransactionRecord",
    "ensure_directories",
    "parse_run_time",
    "read_daily_records",
    "run_daily_pipeline",
    "validate_row",
    "write_user_partitions",
]
