"""Runtime configuration model for DayLedger.

This module owns all environment variable parsing and validation.
Other modules consume a typed config object instead of raw env reads.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
import os
from pathlib import Path

from core.constants import (
    DEFAULT_INPUT_DIR,
    DEFAULT_LOG_LEVEL,
    DEFAULT_OUTPUT_DIR,
    DEFAULT_RUN_TIME,
    FALSE_VALUES,
    TRUE_VALUES,
)
from core.errors import DayLedgerConfigError


@dataclass(frozen=True)
class DayLedgerConfig:
    """Validated runtime configuration.

    Attributes:
        input_dir: Directory scanned for source CSV files.
        output_dir: Directory holding one ledger file per user.
        run_time: Daily local run time in ``HH:MM`` form.
        run_once: Exit after the startup run instead of scheduling.
        log_level: Standard logging level name.
    """

    input_dir: Path
    output_dir: Path
    run_time: str
    run_once: bool
    log_level: str

    @classmethod
    def from_env(cls) -> "DayLedgerConfig":
        """Build config from process environment variables.

        Returns:
            A validated config object.

        Raises:
            DayLedgerConfigError: If environment values are invalid.
        """
        input_dir_value = os.getenv("DAYLEDGER_INPUT_DIR", str(DEFAULT_INPUT_DIR))
        output_dir_value = os.getenv("DAYLEDGER_OUTPUT_DIR", str(DEFAULT_OUTPUT_DIR))
        run_time = os.getenv("DAYLEDGER_RUN_TIME", DEFAULT_RUN_TIME)
        run_once_name, run_once_value = _read_run_once_env()
        log_level_value = os.getenv("DAYLEDGER_LOG_LEVEL", DEFAULT_LOG_LEVEL)
        return cls(
            input_dir=Path(input_dir_value).expanduser().resolve(),
            output_dir=Path(output_dir_value).expanduser().resolve(),
            run_time=run_time.strip(),
            run_once=parse_bool(run_once_name, run_once_value),
            log_level=parse_log_level(log_level_value),
        )


def ensure_directories(config: DayLedgerConfig) -> None:
    """Create input and output directories when absent.

    Args:
        config: Runtime configuration.

    Raises:
        DayLedgerConfigError: If a directory cannot be created.
    """
    for directory in (config.input_dir, config.output_dir):
        try:
            directory.mkdir(parents=True, exist_ok=True)
        except OSError as error:
            raise DayLedgerConfigError(
                f"Failed to create directory {directory}: {error}. "
                "Check permissions or point the DAYLEDGER_*_DIR variables elsewhere."
            ) from error


def parse_bool(name: str, raw_value: str) -> bool:
    """Parse a boolean flag value.

    Args:
        name: Variable name for error context.
        raw_value: Raw string value.

    Returns:
        Parsed boolean.

    Raises:
        DayLedgerConfigError: If the value is not a recognised boolean.
    """
    normalized = raw_value.strip().lower()
    if normalized in TRUE_VALUES:
        return True
    if normalized in FALSE_VALUES:
        return False
    raise DayLedgerConfigError(
        f"Invalid {name} value: expected true/false, got '{raw_value}'. "
        f"Set {name} to one of {TRUE_VALUES + FALSE_VALUES[:-1]}."
    )


def parse_log_level(raw_value: str) -> str:
    """Validate a logging level name.

    Args:
        raw_value: Level name such as ``INFO``.

    Returns:
        Upper-cased level name.

    Raises:
        DayLedgerConfigError: If the level name is unknown.
    """
    level_name = raw_value.strip().upper()
    if not isinstance(logging.getLevelName(level_name), int):
        raise DayLedgerConfigError(
            f"Invalid DAYLEDGER_LOG_LEVEL value: got '{raw_value}'. "
            "Use DEBUG, INFO, WARNING, ERROR or CRITICAL."
        )
    return level_name


def _read_run_once_env() -> tuple[str, str]:
    """Return the run-once variable name and value, preferring the prefixed name."""
    for name in ("DAYLEDGER_RUN_ONCE", "RUN_ONCE"):
        value = os.getenv(name)
        if value is not None:
            return name, value
    return "RUN_ONCE", "false"
