from __future__ import annotations

from sqlalchemy import or_, select
from sqlalchemy.orm import Session

from db import models
from domain.bill import BillId, PurchaseBill
from domain.ledger import AccountId, EntryKind, TransactionId, TransactionLine
from domain.tax import TaxFieldSet


class TransactionLineRepository:
    def __init__(self, session: Session) -> None:
        self._session = session

    def create(self, line: TransactionLine) -> TransactionLine:
        orm_line = self._to_orm(line)
        self._session.add(orm_line)
        self._session.commit()
        self._session.refresh(orm_line)
        return self._to_domain(orm_line)

    def get(self, line_id: TransactionId) -> TransactionLine | None:
        orm_line = self._session.get(models.TransactionLineOrm, line_id)
        if orm_line is None:
            return None
        return self._to_domain(orm_line)

    def list_for_account(self, account_id: AccountId) -> list[TransactionLine]:
        orm = models.TransactionLineOrm
        stmt = (
            select(orm)
            .where(
                or_(
                    orm.debit_account == account_id,
                    orm.credit_account == account_id,
                    orm.bank_account_id == account_id,
                )
            )
            .order_by(orm.occurred_at.asc())
        )
        return [self._to_domain(line) for line in self._session.scalars(stmt)]

    @staticmethod
    def _to_orm(line: TransactionLine) -> models.TransactionLineOrm:
        return models.TransactionLineOrm(
            id=line.id,
            occurred_at=line.occurred_at,
            bank_account_id=line.bank_account_id,
            debit_account=line.debit_account,
            credit_account=line.credit_account,
            amount=line.amount,
            narration=line.narration,
            reference=line.reference,
            kind=line.kind.value,
        )

    @staticmethod
    def _to_domain(orm_line: models.TransactionLineOrm) -> TransactionLine:
        return TransactionLine(
            id=TransactionId(orm_line.id),
            occurred_at=orm_line.occurred_at,
            bank_account_id=AccountId(orm_line.bank_account_id),
            debit_account=AccountId(orm_line.debit_account) if orm_line.debit_account else None,
            credit_account=AccountId(orm_line.credit_account) if orm_line.credit_account else None,
            amount=orm_line.amount,
            narration=orm_line.narration,
            reference=orm_line.reference,
            kind=EntryKind(orm_line.kind),
        )


class PurchaseBillRepository:
    def __init__(self, session: Session) -> None:
        self._session = session

    def create(self, bill: PurchaseBill) -> PurchaseBill:
        orm_bill = models.PurchaseBillOrm(id=bill.id, **self._columns(bill))
        self._session.add(orm_bill)
        self._session.commit()
        self._session.refresh(orm_bill)
        return self._to_domain(orm_bill)

    def get(self, bill_id: BillId) -> PurchaseBill | None:
        orm_bill = self._session.get(models.PurchaseBillOrm, bill_id)
        if orm_bill is None:
            return None
        return self._to_domain(orm_bill)

    def list(self) -> list[PurchaseBill]:
        stmt = select(models.PurchaseBillOrm).order_by(models.PurchaseBillOrm.bill_date.asc())
        return [self._to_domain(bill) for bill in self._session.scalars(stmt)]

    def mark_paid(self, bill_id: BillId) -> PurchaseBill | None:
        orm_bill = self._session.get(models.PurchaseBillOrm, bill_id)
        if orm_bill is None:
            return None
        orm_bill.is_paid = True
        self._session.commit()
        self._session.refresh(orm_bill)
        return self._to_domain(orm_bill)

    def update(self, bill: PurchaseBill) -> PurchaseBill | None:
        orm_bill = self._session.get(models.PurchaseBillOrm, bill.id)
        if orm_bill is None:
            return None
        for column, value in self._columns(bill).items():
            setattr(orm_bill, column, value)
        self._session.commit()
        self._session.refresh(orm_bill)
        return self._to_domain(orm_bill)

    def delete(self, bill_id: BillId) -> bool:
        orm_bill = self._session.get(models.PurchaseBillOrm, bill_id)
        if orm_bill is None:
            return False
        self._session.delete(orm_bill)
        self._session.commit()
        return True

    @staticmethod
    def _columns(bill: PurchaseBill) -> dict[str, object]:
        tax = bill.tax
        return {
            "bill_no": bill.bill_no,
            "vendor_name": bill.vendor_name,
            "bill_date": bill.bill_date,
            "taxable_value": tax.taxable_value,
            "tax_rate_percent": tax.tax_rate_percent,
            "primary_tax_amount": tax.primary_tax_amount,
            "split_tax_amount_a": tax.split_tax_amount_a,
            "split_tax_amount_b": tax.split_tax_amount_b,
            "cess_amount": tax.cess_amount,
            "total": tax.total,
            "is_split": tax.is_split,
            "is_paid": bill.is_paid,
        }

    @staticmethod
    def _to_domain(orm_bill: models.PurchaseBillOrm) -> PurchaseBill:
        return PurchaseBill(
            id=BillId(orm_bill.id),
            bill_no=orm_bill.bill_no,
            vendor_name=orm_bill.vendor_name,
            bill_date=orm_bill.bill_date,
            tax=TaxFieldSet(
                taxable_value=orm_bill.taxable_value,
                tax_rate_percent=orm_bill.tax_rate_percent,
                primary_tax_amount=orm_bill.primary_tax_amount,
                split_tax_amount_a=orm_bill.split_tax_amount_a,
                split_tax_amount_b=orm_bill.split_tax_amount_b,
                cess_amount=orm_bill.cess_amount,
                total=orm_bill.total,
                is_split=orm_bill.is_split,
            ),
            is_paid=orm_bill.is_paid,
        )
