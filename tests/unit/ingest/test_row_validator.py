"""Unit tests for row validation rules."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from core.types import RejectionReason, RowAccepted, RowRejected
from ingest.row_validator import parse_exact_amount, parse_iso_date, validate_row

TARGET_DATE = date(2024, 6, 1)


def test_validate_row_accepts_complete_row() -> None:
    """Valid rows should become records stamped with the source file."""
    outcome = validate_row(["T1", "U1", "2024-06-01", "10.50", "coffee"], TARGET_DATE, "a.csv")

    assert isinstance(outcome, RowAccepted)
    assert outcome.record.transaction_id == "T1"
    assert outcome.record.user_id == "U1"
    assert outcome.record.amount == Decimal("10.50")
    assert outcome.record.source_file == "a.csv"


def test_validate_row_defaults_description_and_trims_identifiers() -> None:
    """Missing description should be empty and ids should be trimmed."""
    outcome = validate_row([" T1 ", " U1", " 2024-06-01 ", " -5 "], TARGET_DATE, "a.csv")

    assert isinstance(outcome, RowAccepted)
    assert (outcome.record.transaction_id, outcome.record.user_id) == ("T1", "U1")
    assert outcome.record.description == ""


def test_validate_row_keeps_description_untrimmed() -> None:
    """Description should be carried verbatim."""
    outcome = validate_row(["T1", "U1", "2024-06-01", "1", "  padded  "], TARGET_DATE, "a.csv")

    assert isinstance(outcome, RowAccepted) and outcome.record.description == "  padded  "


@pytest.mark.parametrize(
    "row",
    [[], ["T1"], ["T1", "U1", "2024-06-01"]],
)
def test_validate_row_rejects_short_rows(row: list[str]) -> None:
    """Rows with fewer than four fields should be malformed."""
    outcome = validate_row(row, TARGET_DATE, "a.csv")

    assert isinstance(outcome, RowRejected)
    assert outcome.reason is RejectionReason.MALFORMED_ROW
    assert outcome.raw_row == tuple(row)


def test_validate_row_rejects_unparseable_date() -> None:
    """Unparseable dates should be rejected as invalid date."""
    outcome = validate_row(["T4", "U1", "notadate", "10"], TARGET_DATE, "a.csv")

    assert isinstance(outcome, RowRejected) and outcome.reason is RejectionReason.INVALID_DATE


def test_validate_row_drops_other_dates_silently() -> None:
    """Rows from another day should be a silent date mismatch."""
    outcome = validate_row(["T3", "U1", "2024-06-02", "1"], TARGET_DATE, "a.csv")

    assert isinstance(outcome, RowRejected)
    assert outcome.reason is RejectionReason.DATE_MISMATCH
    assert outcome.reason.is_silent


def test_validate_row_checks_date_before_amount() -> None:
    """An off-day row with a bad amount should still be a date mismatch."""
    outcome = validate_row(["T3", "U1", "2024-06-02", "oops"], TARGET_DATE, "a.csv")

    assert isinstance(outcome, RowRejected) and outcome.reason is RejectionReason.DATE_MISMATCH


def test_validate_row_rejects_unparseable_amount() -> None:
    """Non-numeric amounts should be rejected as invalid amount."""
    outcome = validate_row(["T5", "U1", "2024-06-01", "ten"], TARGET_DATE, "a.csv")

    assert isinstance(outcome, RowRejected) and outcome.reason is RejectionReason.INVALID_AMOUNT


def test_validate_row_checks_amount_before_identifiers() -> None:
    """A row missing ids with a bad amount should report the amount."""
    outcome = validate_row(["", "U1", "2024-06-01", "x"], TARGET_DATE, "a.csv")

    assert isinstance(outcome, RowRejected) and outcome.reason is RejectionReason.INVALID_AMOUNT


@pytest.mark.parametrize(
    "row",
    [["", "U1", "2024-06-01", "10"], ["T1", "   ", "2024-06-01", "10"]],
)
def test_validate_row_rejects_missing_identifiers(row: list[str]) -> None:
    """Blank transaction or user ids should be rejected."""
    outcome = validate_row(row, TARGET_DATE, "a.csv")

    assert isinstance(outcome, RowRejected)
    assert outcome.reason is RejectionReason.MISSING_IDENTIFIER
    assert not outcome.reason.is_silent


@pytest.mark.parametrize("text", ["2024-6-1", "20240601", "2024-02-30", "2024-06-01T00:00", ""])
def test_parse_iso_date_rejects_non_strict_dates(text: str) -> None:
    """Only strict YYYY-MM-DD calendar dates should parse."""
    assert parse_iso_date(text) is None


@pytest.mark.parametrize(
    ("text", "expected"),
    [("10.50", "10.50"), ("-5", "-5"), ("+.5", "0.5"), ("1E+3", "1E+3"), ("0.000001", "0.000001")],
)
def test_parse_exact_amount_preserves_value(text: str, expected: str) -> None:
    """Decimal text should parse without precision loss."""
    assert parse_exact_amount(text) == Decimal(expected)


@pytest.mark.parametrize("text", ["NaN", "Infinity", "1_000", "1,000", "", "--1", "1.2.3"])
def test_parse_exact_amount_rejects_non_decimal_text(text: str) -> None:
    """Special values and separators should not parse as amounts."""
    assert parse_exact_amount(text) is None


@pytest.mark.parametrize("text", ["1E999999999999", "1E10001", "1E-10001"])
def test_parse_exact_amount_rejects_unrenderable_exponents(text: str) -> None:
    """Exponents too large to write in plain notation should not parse."""
    assert parse_exact_amount(text) is None


def test_validate_row_rejects_huge_exponent_amount() -> None:
    """A huge exponent should be classified as an invalid amount."""
    outcome = validate_row(["T1", "UA", "2024-06-01", "1E999999999999"], TARGET_DATE, "a.csv")

    assert isinstance(outcome, RowRejected) and outcome.reason is RejectionReason.INVALID_AMOUNT
