"""Integration tests for the daily ledger workflow."""

from __future__ import annotations

import csv
from dataclasses import replace
from datetime import date
from pathlib import Path

from core.config import DayLedgerConfig
from core.constants import LEDGER_HEADER
from ingest.daily_reader import read_daily_records
from ingest.pipeline import run_daily_pipeline
from tests.fixture_paths import fixture_path


def _read_rows(path: Path) -> list[list[str]]:
    with path.open(encoding="utf-8", newline="") as handle:
        return list(csv.reader(handle))


def _config(input_dir: Path, output_dir: Path) -> DayLedgerConfig:
    return replace(DayLedgerConfig.from_env(), input_dir=input_dir, output_dir=output_dir)


def test_daily_scenario_partitions_by_user(tmp_path: Path) -> None:
    """Today's rows should land in their user's ledger and others drop."""
    config = _config(fixture_path("input_daily"), tmp_path)

    summary = run_daily_pipeline(config, date(2024, 6, 1))

    assert summary.succeeded and summary.matched_count == 2
    assert _read_rows(tmp_path / "U1.csv") == [
        list(LEDGER_HEADER),
        ["T1", "2024-06-01", "10.50", "coffee", "a.csv"],
    ]
    assert _read_rows(tmp_path / "U2.csv") == [
        list(LEDGER_HEADER),
        ["T2", "2024-06-01", "-5", "refund", "a.csv"],
    ]


def test_two_days_share_a_single_header(tmp_path: Path) -> None:
    """Runs on different days should append under one header."""
    config = _config(fixture_path("input_daily"), tmp_path)

    run_daily_pipeline(config, date(2024, 6, 1))
    run_daily_pipeline(config, date(2024, 6, 2))

    rows = _read_rows(tmp_path / "U1.csv")
    assert rows.count(list(LEDGER_HEADER)) == 1
    assert [row[0] for row in rows[1:]] == ["T1", "T3"]


def test_mixed_inputs_keep_partitions_and_exact_amounts(tmp_path: Path) -> None:
    """Records should only appear in their own user's ledger."""
    config = _config(fixture_path("input_mixed"), tmp_path)

    run_daily_pipeline(config, date(2024, 6, 1))

    ledgers = {path.stem: _read_rows(path)[1:] for path in tmp_path.glob("*.csv")}
    assert set(ledgers) == {"U1", "U3"}
    assert [row[0] for row in ledgers["U1"]] == ["T10", "T21"]
    assert [(row[0], row[2]) for row in ledgers["U3"]] == [("T11", "1000"), ("T20", "0.001")]
    assert ledgers["U1"][0][3] == "rent, June"
    assert ledgers["U1"][1][2] == "-12.3400"


def test_ledger_rows_read_back_identically(tmp_path: Path) -> None:
    """Written ledger rows should re-read to the same field values."""
    config = _config(fixture_path("input_mixed"), tmp_path)
    expected = read_daily_records(config.input_dir, date(2024, 6, 1)).records

    run_daily_pipeline(config, date(2024, 6, 1))

    written = {
        row[0]: row for path in tmp_path.glob("*.csv") for row in _read_rows(path)[1:]
    }
    for record in expected:
        row = written[record.transaction_id]
        assert row[1] == record.date.isoformat()
        assert row[2] == format(record.amount, "f")
        assert row[3] == record.description


def test_unreadable_file_does_not_block_other_inputs(tmp_path: Path) -> None:
    """A corrupt input file should be skipped while others are written."""
    input_dir = tmp_path / "input"
    output_dir = tmp_path / "output"
    input_dir.mkdir()
    (input_dir / "corrupt.csv").write_bytes(b"header\n\xff\xfe\x00\xfa\n")
    (input_dir / "valid.csv").write_text(
        "transactionId,userId,date,amount,description\nT1,U1,2024-06-01,4.20,lunch\n",
        encoding="utf-8",
    )

    summary = run_daily_pipeline(_config(input_dir, output_dir), date(2024, 6, 1))

    assert summary.failed_files == (str(input_dir / "corrupt.csv"),)
    assert _read_rows(output_dir / "U1.csv")[1][0] == "T1"


def test_huge_exponent_amount_does_not_block_other_users(tmp_path: Path) -> None:
    """An unrenderable amount should be skipped while other users are written."""
    input_dir = tmp_path / "input"
    output_dir = tmp_path / "output"
    input_dir.mkdir()
    (input_dir / "a.csv").write_text(
        "h\nT1,UA,2024-06-01,1E999999999999\nT2,UB,2024-06-01,5\n",
        encoding="utf-8",
    )

    summary = run_daily_pipeline(_config(input_dir, output_dir), date(2024, 6, 1))

    assert summary.succeeded and summary.written_count == 1
    assert not (output_dir / "UA.csv").exists()
    assert _read_rows(output_dir / "UB.csv")[1] == ["T2", "2024-06-01", "5", "", "a.csv"]
