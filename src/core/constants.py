"""Core constants used across DayLedger modules.

This module centralizes file layout, schema and schedule constants.
Keeping values here avoids magic literals in business logic.
"""

from __future__ import annotations

from pathlib import Path

DEFAULT_INPUT_DIR = Path("input")
DEFAULT_OUTPUT_DIR = Path("output")
DEFAULT_RUN_TIME = "02:00"
DEFAULT_LOG_LEVEL = "INFO"
INPUT_FILE_PATTERN = "*.csv"
LEDGER_FILE_SUFFIX = ".csv"
INPUT_ENCODING = "utf-8-sig"
LEDGER_ENCODING = "utf-8"
LEDGER_LINE_TERMINATOR = "\n"
MIN_ROW_FIELDS = 4
MAX_AMOUNT_EXPONENT = 10_000
DESCRIPTION_FIELD_INDEX = 4
LEDGER_HEADER = ("transactionId", "date", "amount", "description", "sourceFile")
TRUE_VALUES = ("1", "true", "yes", "on")
FALSE_VALUES = ("0", "false", "no", "off", "")
