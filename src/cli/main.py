"""DayLedger CLI entry points.

This module exposes the one-shot ``run`` command and the scheduled
``serve`` command. It owns process bootstrap and the daily scheduler.
"""

from __future__ import annotations

import argparse
from dataclasses import replace
from datetime import date
from pathlib import Path
from typing import Any, Sequence

from core.config import DayLedgerConfig, ensure_directories, parse_log_level
from core.errors import DayLedgerError
from core.logging_config import configure_logging, get_logger
from ingest.pipeline import run_daily_pipeline
from scheduling.daily_scheduler import DailyScheduler, parse_run_time

_LOGGER = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level CLI parser.

    Returns:
        Configured argument parser.
    """
    parser = argparse.ArgumentParser(
        prog="dayledger",
        description="Append today's bank transactions to per-user ledgers",
    )
    parser.add_argument("--input-dir", help="Override DAYLEDGER_INPUT_DIR for this command")
    parser.add_argument("--output-dir", help="Override DAYLEDGER_OUTPUT_DIR for this command")
    parser.add_argument("--log-level", help="Override DAYLEDGER_LOG_LEVEL for this command")
    subparsers = parser.add_subparsers(dest="command", required=True)
    _add_run_command(subparsers)
    _add_serve_command(subparsers)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the DayLedger CLI.

    Args:
        argv: Optional argument vector.

    Returns:
        Process exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        config = _build_config(args)
    except DayLedgerError as error:
        print(f"config_error={error}")
        return 2
    configure_logging(config.log_level)
    if args.command == "run":
        return _run_run_command(config, args)
    if args.command == "serve":
        return _run_serve_command(config)
    parser.error(f"Unsupported command: {args.command}")
    return 2


def _add_run_command(subparsers: Any) -> None:
    """Register run subcommand."""
    parser = subparsers.add_parser("run", help="Process one day immediately and exit")
    parser.add_argument(
        "--date",
        type=_parse_date_argument,
        help="Target date as YYYY-MM-DD, local today when omitted",
    )


def _add_serve_command(subparsers: Any) -> None:
    """Register serve subcommand."""
    parser = subparsers.add_parser(
        "serve",
        help="Run at startup, then every day at the configured time",
    )
    parser.add_argument("--run-time", help="Override DAYLEDGER_RUN_TIME as HH:MM")
    parser.add_argument(
        "--once",
        action="store_true",
        help="Exit after the startup run, same as RUN_ONCE=true",
    )


def _build_config(args: argparse.Namespace) -> DayLedgerConfig:
    """Build config from env with CLI overrides applied.

    Args:
        args: Parsed CLI args.

    Returns:
        Runtime configuration.

    Raises:
        DayLedgerError: If env or override values are invalid.
    """
    config = DayLedgerConfig.from_env()
    if args.input_dir:
        config = replace(config, input_dir=Path(args.input_dir).expanduser().resolve())
    if args.output_dir:
        config = replace(config, output_dir=Path(args.output_dir).expanduser().resolve())
    if args.log_level:
        config = replace(config, log_level=parse_log_level(args.log_level))
    if getattr(args, "run_time", None):
        config = replace(config, run_time=args.run_time)
    if getattr(args, "once", False):
        config = replace(config, run_once=True)
    parse_run_time(config.run_time)
    ensure_directories(config)
    return config


def _run_run_command(config: DayLedgerConfig, args: argparse.Namespace) -> int:
    """Handle run command.

    Args:
        config: Runtime configuration.
        args: Parsed CLI args.

    Returns:
        Exit code, non-zero only for a run-level failure.
    """
    summary = run_daily_pipeline(config, args.date)
    print(
        f"date={summary.target_date.isoformat()}\t"
        f"matched={summary.matched_count}\t"
        f"written={summary.written_count}"
    )
    return 0 if summary.succeeded else 1


def _run_serve_command(config: DayLedgerConfig) -> int:
    """Handle serve command.

    Args:
        config: Runtime configuration.

    Returns:
        Exit code.
    """
    scheduler: DailyScheduler | None = None
    try:
        run_daily_pipeline(config)
        if config.run_once:
            return 0
        scheduler = DailyScheduler(
            task=lambda: run_daily_pipeline(config),
            run_time=parse_run_time(config.run_time),
        )
        _LOGGER.info(
            "scheduler_started",
            run_time=config.run_time,
            input_dir=str(config.input_dir),
            output_dir=str(config.output_dir),
        )
        scheduler.run_forever()
    except KeyboardInterrupt:
        if scheduler is not None:
            scheduler.stop()
        _LOGGER.info("serve_interrupted")
    return 0


def _parse_date_argument(raw_value: str) -> date:
    """Parse a ``--date`` argument value."""
    try:
        return date.fromisoformat(raw_value)
    except ValueError as error:
        raise argparse.ArgumentTypeError(
            f"invalid date '{raw_value}', expected YYYY-MM-DD"
        ) from error
