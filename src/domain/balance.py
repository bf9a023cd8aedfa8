from __future__ import annotations

import logging
from decimal import Decimal
from typing import Iterable, Sequence

from .ledger import AccountId, BalancedEntry, LedgerEntry, LedgerSummary, LedgerView, TransactionLine

logger = logging.getLogger(__name__)


def _signed_delta(entry: LedgerEntry) -> Decimal:
    debit = abs(entry.debit_amount) if entry.debit_amount is not None else Decimal(0)
    credit = abs(entry.credit_amount) if entry.credit_amount is not None else Decimal(0)
    return credit - debit


def accumulate(entries: Iterable[LedgerEntry]) -> list[BalancedEntry]:
    """Sort entries chronologically and attach the running balance to each one.

    The sort is stable, so entries sharing a date keep their input order.
    """
    ordered = sorted(entries, key=lambda e: e.occurred_at)

    balance = Decimal(0)
    balanced: list[BalancedEntry] = []
    for entry in ordered:
        balance += _signed_delta(entry)
        balanced.append(BalancedEntry.model_validate({**entry.model_dump(), "running_balance": balance}))

    logger.debug("Accumulated %d ledger entries, closing balance %s", len(balanced), balance)
    return balanced


def summarize(entries: Sequence[BalancedEntry]) -> LedgerSummary:
    total_debits = sum(
        (abs(e.debit_amount) for e in entries if e.debit_amount is not None),
        start=Decimal(0),
    )
    total_credits = sum(
        (abs(e.credit_amount) for e in entries if e.credit_amount is not None),
        start=Decimal(0),
    )
    closing_balance = entries[-1].running_balance if entries else Decimal(0)
    return LedgerSummary(
        entry_count=len(entries),
        total_debits=total_debits,
        total_credits=total_credits,
        closing_balance=closing_balance,
    )


def build_ledger_view(entries: Iterable[LedgerEntry]) -> LedgerView:
    balanced = accumulate(entries)
    return LedgerView(entries=balanced, summary=summarize(balanced))


def entries_for_account(lines: Iterable[TransactionLine], account_id: AccountId) -> list[LedgerEntry]:
    """Project two-sided transaction lines onto the ledger of a single account."""
    entries: list[LedgerEntry] = []
    for line in lines:
        if account_id not in (line.debit_account, line.credit_account, line.bank_account_id):
            continue

        amount = abs(line.amount)
        debit: Decimal | None = None
        credit: Decimal | None = None
        if line.debit_account == account_id:
            debit = amount
        elif line.credit_account == account_id:
            credit = amount
        elif line.credit_account is None and line.amount > 0:
            # Received payment recorded against the bank account only.
            credit = amount

        entries.append(
            LedgerEntry(
                occurred_at=line.occurred_at,
                kind=line.kind,
                debit_amount=debit or None,
                credit_amount=credit or None,
                note=line.narration,
            )
        )
    return entries
