from __future__ import annotations

import csv
import logging
from datetime import date
from decimal import Decimal, InvalidOperation
from pathlib import Path

from domain.ledger import EntryKind, LedgerEntry

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = {"occurred_at", "kind", "debit", "credit"}


class LedgerCsvError(ValueError):
    pass


def load_ledger_entries(csv_path: Path) -> list[LedgerEntry]:
    """Load the ledger entries of one account from CSV.

    Each row should contain: occurred_at,kind,debit,credit[,note]
    Dates are ISO formatted; blank amounts are treated as absent. Rows are
    returned in file order.
    """

    with csv_path.open(newline="") as f:
        reader = csv.DictReader(f)
        if reader.fieldnames is None:
            raise LedgerCsvError(f"Ledger CSV {csv_path} is empty or missing headers")

        missing = REQUIRED_COLUMNS - set(reader.fieldnames)
        if missing:
            raise LedgerCsvError(f"Ledger CSV {csv_path} missing required columns: {', '.join(sorted(missing))}")

        entries: list[LedgerEntry] = []
        for line_no, row in enumerate(reader, start=2):
            entries.append(
                LedgerEntry(
                    occurred_at=_parse_date(row["occurred_at"], line_no),
                    kind=_parse_kind(row["kind"], line_no),
                    debit_amount=_parse_amount(row["debit"], line_no),
                    credit_amount=_parse_amount(row["credit"], line_no),
                    note=(row.get("note") or "").strip(),
                )
            )

    logger.info("Loaded %d ledger entries from %s", len(entries), csv_path)
    return entries


def _parse_date(raw: str | None, line_no: int) -> date:
    if not raw or not raw.strip():
        raise LedgerCsvError(f"line {line_no}: occurred_at is required")
    try:
        return date.fromisoformat(raw.strip())
    except ValueError as exc:
        raise LedgerCsvError(f"line {line_no}: invalid date {raw!r}") from exc


def _parse_kind(raw: str | None, line_no: int) -> EntryKind:
    value = (raw or "").strip().upper()
    try:
        return EntryKind(value)
    except ValueError as exc:
        raise LedgerCsvError(f"line {line_no}: unknown entry kind {raw!r}") from exc


def _parse_amount(raw: str | None, line_no: int) -> Decimal | None:
    if raw is None or raw.strip() == "":
        return None
    try:
        amount = Decimal(raw.strip().replace(",", ""))
    except InvalidOperation as exc:
        raise LedgerCsvError(f"line {line_no}: amount {raw!r} is not a number") from exc
    if not amount.is_finite():
        raise LedgerCsvError(f"line {line_no}: amount {raw!r} is not a number")
    if amount < 0:
        raise LedgerCsvError(f"line {line_no}: amount {raw!r} must not be negative")
    return amount
