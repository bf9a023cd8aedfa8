from __future__ import annotations

from datetime import date
from decimal import Decimal
from enum import StrEnum
from typing import NewType
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field, model_validator

AccountId = NewType("AccountId", str)
EntryId = NewType("EntryId", UUID)
TransactionId = NewType("TransactionId", UUID)


class EntryKind(StrEnum):
    BILL = "BILL"
    PAYMENT = "PAYMENT"
    JOURNAL = "JOURNAL"
    EXPENSE = "EXPENSE"
    ADVANCE = "ADVANCE"
    RECEIPT = "RECEIPT"


class LedgerEntry(BaseModel):
    """A single dated movement of value on one account.

    Amount sign convention:
    - Amounts are read as absolute values by the balance accumulator.
    - Direction comes from the field (debit or credit), not from the sign.
    """

    model_config = ConfigDict(frozen=True)

    id: EntryId = EntryId(Field(default_factory=uuid4))
    occurred_at: date
    kind: EntryKind
    debit_amount: Decimal | None = None
    credit_amount: Decimal | None = None
    note: str = ""


class BalancedEntry(LedgerEntry):
    running_balance: Decimal


class TransactionLine(BaseModel):
    """Two-sided transaction as stored by the backend."""

    id: TransactionId = TransactionId(Field(default_factory=uuid4))
    occurred_at: date
    bank_account_id: AccountId
    debit_account: AccountId | None = None
    credit_account: AccountId | None = None
    amount: Decimal
    narration: str = ""
    reference: str = ""
    kind: EntryKind = EntryKind.JOURNAL

    @model_validator(mode="after")
    def _validate_fields(self) -> TransactionLine:
        if not self.bank_account_id:
            raise ValueError("TransactionLine.bank_account_id must be non-empty")
        if self.debit_account is not None and self.debit_account == self.credit_account:
            raise ValueError("debit_account and credit_account must differ")
        return self


class LedgerSummary(BaseModel):
    entry_count: int
    total_debits: Decimal
    total_credits: Decimal
    closing_balance: Decimal


class LedgerView(BaseModel):
    entries: list[BalancedEntry]
    summary: LedgerSummary
