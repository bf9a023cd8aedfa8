from __future__ import annotations

from datetime import date
from decimal import Decimal
from uuid import UUID, uuid4

from sqlalchemy import Boolean, Date, String, Uuid
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.types import TypeDecorator


class DecimalAsString(TypeDecorator):
    impl = String
    cache_ok = True

    def process_bind_param(self, value: Decimal | None, dialect: object) -> str | None:
        if value is None:
            return None
        return str(value)

    def process_result_value(self, value: str | None, dialect: object) -> Decimal | None:
        if value is None:
            return None
        return Decimal(value)


class Base(DeclarativeBase):
    pass


class TransactionLineOrm(Base):
    __tablename__ = "transaction_lines"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)
    occurred_at: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    bank_account_id: Mapped[str] = mapped_column(String, nullable=False, index=True)
    debit_account: Mapped[str | None] = mapped_column(String, nullable=True, index=True)
    credit_account: Mapped[str | None] = mapped_column(String, nullable=True, index=True)
    amount: Mapped[Decimal] = mapped_column(DecimalAsString, nullable=False)
    narration: Mapped[str] = mapped_column(String, nullable=False, default="")
    reference: Mapped[str] = mapped_column(String, nullable=False, default="")
    kind: Mapped[str] = mapped_column(String, nullable=False)


class PurchaseBillOrm(Base):
    __tablename__ = "purchase_bills"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)
    bill_no: Mapped[str] = mapped_column(String, nullable=False)
    vendor_name: Mapped[str] = mapped_column(String, nullable=False)
    bill_date: Mapped[date] = mapped_column(Date, nullable=False)
    taxable_value: Mapped[Decimal | None] = mapped_column(DecimalAsString, nullable=True)
    tax_rate_percent: Mapped[Decimal | None] = mapped_column(DecimalAsString, nullable=True)
    primary_tax_amount: Mapped[Decimal | None] = mapped_column(DecimalAsString, nullable=True)
    split_tax_amount_a: Mapped[Decimal | None] = mapped_column(DecimalAsString, nullable=True)
    split_tax_amount_b: Mapped[Decimal | None] = mapped_column(DecimalAsString, nullable=True)
    cess_amount: Mapped[Decimal | None] = mapped_column(DecimalAsString, nullable=True)
    total: Mapped[Decimal | None] = mapped_column(DecimalAsString, nullable=True)
    is_split: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    is_paid: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
