"""Row-level validation for source transaction CSV rows.

This module turns one raw CSV row into an accepted record or a
rejection with a reason. It never raises for malformed input.
"""

from __future__ import annotations

import re
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Sequence

from core.constants import DESCRIPTION_FIELD_INDEX, MAX_AMOUNT_EXPONENT, MIN_ROW_FIELDS
from core.types import RejectionReason, RowAccepted, RowOutcome, RowRejected, TransactionRecord

_ISO_DATE_PATTERN = re.compile(r"\d{4}-\d{2}-\d{2}")
_DECIMAL_PATTERN = re.compile(r"[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?")


def validate_row(row: Sequence[str], target_date: date, source_file: str) -> RowOutcome:
    """Validate one raw row against the target date.

    Rules are applied in order and the first failing rule wins:
    field count, date syntax, date match, amount syntax, identifiers.

    Args:
        row: Ordered CSV fields.
        target_date: Date the run is filtering on.
        source_file: Base name of the file the row came from.

    Returns:
        ``RowAccepted`` with the built record, or ``RowRejected``.
    """
    raw_row = tuple(row)
    if len(raw_row) < MIN_ROW_FIELDS:
        return RowRejected(RejectionReason.MALFORMED_ROW, raw_row)
    transaction_id = raw_row[0].strip()
    user_id = raw_row[1].strip()
    description = ""
    if len(raw_row) > DESCRIPTION_FIELD_INDEX:
        description = raw_row[DESCRIPTION_FIELD_INDEX]
    row_date = parse_iso_date(raw_row[2].strip())
    if row_date is None:
        return RowRejected(RejectionReason.INVALID_DATE, raw_row)
    if row_date != target_date:
        return RowRejected(RejectionReason.DATE_MISMATCH, raw_row)
    amount = parse_exact_amount(raw_row[3].strip())
    if amount is None:
        return RowRejected(RejectionReason.INVALID_AMOUNT, raw_row)
    if not transaction_id or not user_id:
        return RowRejected(RejectionReason.MISSING_IDENTIFIER, raw_row)
    record = TransactionRecord(
        transaction_id=transaction_id,
        user_id=user_id,
        date=row_date,
        amount=amount,
        description=description,
        source_file=source_file,
    )
    return RowAccepted(record)


def parse_iso_date(text: str) -> date | None:
    """Parse strict ``YYYY-MM-DD`` text.

    Args:
        text: Trimmed date text.

    Returns:
        Parsed date, or ``None`` when the text is not a valid calendar date.
    """
    if not _ISO_DATE_PATTERN.fullmatch(text):
        return None
    try:
        return date.fromisoformat(text)
    except ValueError:
        return None


def parse_exact_amount(text: str) -> Decimal | None:
    """Parse decimal text without precision loss.

    Args:
        text: Trimmed amount text.

    Returns:
        Exact decimal value, or ``None`` for non-numeric text or an
        exponent too large to render in plain notation.
    """
    if not _DECIMAL_PATTERN.fullmatch(text):
        return None
    try:
        amount = Decimal(text)
    except InvalidOperation:
        return None
    exponent = amount.as_tuple().exponent
    if not isinstance(exponent, int) or abs(exponent) > MAX_AMOUNT_EXPONENT:
        return None
    return amount
