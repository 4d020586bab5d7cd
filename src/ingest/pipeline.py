"""Daily ingest orchestration.

This module composes the daily reader and ledger writer for one run.
It is the boundary where unexpected failures are caught and logged so
the hosting scheduler keeps running.
"""

from __future__ import annotations

from datetime import date, datetime
from pathlib import Path
from typing import Callable

from core.config import DayLedgerConfig
from core.logging_config import get_logger
from core.types import DailyReadResult, PartitionWriteResult, PipelineRunSummary
from ingest.daily_reader import read_daily_records
from store.ledger_writer import write_user_partitions

_LOGGER = get_logger(__name__)


class DailyPipelineRunner:
    """Runner for one read-validate-partition-append execution."""

    def __init__(
        self,
        input_dir: Path,
        output_dir: Path,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._input_dir = input_dir
        self._output_dir = output_dir
        self._clock = clock

    def run(self, target_date: date | None = None) -> PipelineRunSummary:
        """Execute one run and return its summary.

        Args:
            target_date: Date to process, local today when omitted.

        Returns:
            Summary of the run. Never raises for run failures; they are
            logged and reported through ``PipelineRunSummary.error``.
        """
        started_at = self._clock()
        run_date = target_date or started_at.date()
        _LOGGER.info(
            "pipeline_started",
            target_date=run_date.isoformat(),
            started_at=started_at.isoformat(),
            input_dir=str(self._input_dir),
        )
        try:
            read_result = read_daily_records(self._input_dir, run_date)
            _log_matched(read_result)
            write_results = write_user_partitions(read_result.records, self._output_dir)
        except Exception as error:
            _LOGGER.exception(
                "pipeline_failed",
                target_date=run_date.isoformat(),
                error=repr(error),
            )
            return PipelineRunSummary(
                target_date=run_date,
                started_at=started_at,
                finished_at=self._clock(),
                error=repr(error),
            )
        summary = _build_summary(read_result, write_results, started_at, self._clock())
        _log_completion(summary)
        return summary


def run_daily_pipeline(
    config: DayLedgerConfig,
    target_date: date | None = None,
) -> PipelineRunSummary:
    """Run the pipeline once against configured directories.

    Args:
        config: Runtime configuration.
        target_date: Date to process, local today when omitted.

    Returns:
        Summary of the run.
    """
    runner = DailyPipelineRunner(config.input_dir, config.output_dir)
    return runner.run(target_date)


def _build_summary(
    read_result: DailyReadResult,
    write_results: list[PartitionWriteResult],
    started_at: datetime,
    finished_at: datetime,
) -> PipelineRunSummary:
    """Build a completed-run summary from stage results."""
    return PipelineRunSummary(
        target_date=read_result.target_date,
        started_at=started_at,
        finished_at=finished_at,
        matched_count=len(read_result.records),
        written_count=sum(result.rows_written for result in write_results),
        failed_files=tuple(str(failure.source_file) for failure in read_result.failed_files),
        failed_partitions=tuple(
            result.user_id for result in write_results if not result.succeeded
        ),
    )


def _log_matched(read_result: DailyReadResult) -> None:
    """Log the number of records matched for the target date."""
    _LOGGER.info(
        "pipeline_matched",
        target_date=read_result.target_date.isoformat(),
        matched_count=len(read_result.records),
        files_read=len(read_result.file_outcomes),
        files_failed=len(read_result.failed_files),
        rejections={
            reason.value: count for reason, count in read_result.rejection_counts().items()
        },
    )


def _log_completion(summary: PipelineRunSummary) -> None:
    """Log pipeline completion with contextual metadata."""
    _LOGGER.info(
        "pipeline_completed",
        target_date=summary.target_date.isoformat(),
        finished_at=summary.finished_at.isoformat(),
        matched_count=summary.matched_count,
        written_count=summary.written_count,
        failed_files=list(summary.failed_files),
        failed_partitions=list(summary.failed_partitions),
    )
