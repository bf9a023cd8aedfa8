from __future__ import annotations

from datetime import date
from typing import NewType
from uuid import UUID, uuid4

from pydantic import BaseModel, Field, model_validator

from .tax import TaxFieldSet

BillId = NewType("BillId", UUID)


class PurchaseBill(BaseModel):
    id: BillId = BillId(Field(default_factory=uuid4))
    bill_no: str
    vendor_name: str
    bill_date: date
    tax: TaxFieldSet = Field(default_factory=TaxFieldSet)
    is_paid: bool = False

    @model_validator(mode="after")
    def _validate_fields(self) -> PurchaseBill:
        if not self.bill_no:
            raise ValueError("PurchaseBill.bill_no must be non-empty")
        if not self.vendor_name:
            raise ValueError("PurchaseBill.vendor_name must be non-empty")
        return self
