"""DayLedger exception hierarchy.

This module defines traceable domain errors with clear boundaries.
Row and file skips are outcome values, not exceptions; these types
cover configuration, run-level and per-partition failures.
"""

from __future__ import annotations


class DayLedgerError(Exception):
    """Base exception for all DayLedger failures."""


class DayLedgerConfigError(DayLedgerError):
    """Raised for invalid runtime configuration."""


class DayLedgerIngestError(DayLedgerError):
    """Raised when the input directory cannot be enumerated."""


class DayLedgerStoreError(DayLedgerError):
    """Raised when a user ledger file cannot be written."""


class DayLedgerScheduleError(DayLedgerError):
    """Raised for invalid run times or scheduler misuse."""
