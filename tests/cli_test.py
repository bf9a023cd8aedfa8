from datetime import date
from decimal import Decimal
from pathlib import Path
from typing import Generator

import pytest

from config import config
from db.db import init_db
from db.repositories import TransactionLineRepository
from domain.ledger import EntryKind, TransactionLine
from main import main
from tests.constants import HDFC_CURRENT, VENDOR_ACME


@pytest.fixture()
def db_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Generator[Path, None, None]:
    path = tmp_path / "finance.db"
    monkeypatch.setenv("DATABASE_FILE", str(path))
    config.cache_clear()
    yield path
    config.cache_clear()


def test_ledger_command_prints_running_balance(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    csv_path = tmp_path / "ledger.csv"
    csv_path.write_text("occurred_at,kind,debit,credit\n2025-01-10,receipt,,5000\n2025-01-05,bill,2000,\n")

    main(["ledger", "--csv", str(csv_path)])

    out = capsys.readouterr().out
    assert "Balance:       3000.00" in out
    assert "-2000.00" in out


def test_ledger_command_reads_stored_transactions(db_file: Path, capsys: pytest.CaptureFixture[str]) -> None:
    with init_db(db_file=db_file) as session:
        repo = TransactionLineRepository(session)
        repo.create(
            TransactionLine(
                occurred_at=date(2025, 1, 10),
                bank_account_id=HDFC_CURRENT,
                amount=Decimal("5000"),
                kind=EntryKind.RECEIPT,
            )
        )
        repo.create(
            TransactionLine(
                occurred_at=date(2025, 1, 5),
                bank_account_id=HDFC_CURRENT,
                debit_account=HDFC_CURRENT,
                credit_account=VENDOR_ACME,
                amount=Decimal("2000"),
                kind=EntryKind.BILL,
            )
        )

    main(["ledger", "--stored-account", HDFC_CURRENT])

    out = capsys.readouterr().out
    assert "Entries: 2" in out
    assert "Balance:       3000.00" in out


def test_tax_command_back_solves_from_primary(capsys: pytest.CaptureFixture[str]) -> None:
    main(["tax", "--rate", "18", "--primary", "180", "--edited", "primary_tax_amount"])

    out = capsys.readouterr().out
    assert "Taxable value  1000.00" in out
    assert "Total          1180.00" in out


def test_log_level_is_case_insensitive(capsys: pytest.CaptureFixture[str]) -> None:
    main(["--log-level", "debug", "tax", "--taxable-value", "100", "--rate", "5"])

    assert "Total          105.00" in capsys.readouterr().out
