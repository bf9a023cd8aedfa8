"""Reconciliation of the linked tax fields on a bill form.

The caller names the field it just edited; that field is taken as ground
truth and the rest of the set is recomputed from it. ``tax_rate_percent``,
``cess_amount`` and ``is_split`` are never recomputed.

A value of ``None`` means "cleared": not applicable, or undefined because a
back-solve had no valid answer (for example a zero rate).
"""

from __future__ import annotations

import logging
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from enum import StrEnum
from typing import Callable

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

CENTS = Decimal("0.01")
HUNDRED = Decimal(100)
TWO_HUNDRED = Decimal(200)


class TaxField(StrEnum):
    TAXABLE_VALUE = "taxable_value"
    TAX_RATE_PERCENT = "tax_rate_percent"
    PRIMARY_TAX_AMOUNT = "primary_tax_amount"
    SPLIT_TAX_AMOUNT_A = "split_tax_amount_a"
    SPLIT_TAX_AMOUNT_B = "split_tax_amount_b"
    CESS_AMOUNT = "cess_amount"
    TOTAL = "total"
    IS_SPLIT = "is_split"


class TaxFieldSet(BaseModel):
    """Working state of the tax section of a bill.

    ``primary_tax_amount`` is authoritative when ``is_split`` is false,
    ``split_tax_amount_a``/``split_tax_amount_b`` when it is true.
    """

    taxable_value: Decimal | None = Field(default=None, ge=0)
    tax_rate_percent: Decimal | None = Field(default=None, ge=0)
    primary_tax_amount: Decimal | None = Field(default=None, ge=0)
    split_tax_amount_a: Decimal | None = Field(default=None, ge=0)
    split_tax_amount_b: Decimal | None = Field(default=None, ge=0)
    cess_amount: Decimal | None = Field(default=None, ge=0)
    total: Decimal | None = Field(default=None, ge=0)
    is_split: bool = False

    def held_tax(self) -> Decimal:
        """Tax currently held in the authoritative field(s)."""
        if self.is_split:
            return _zero_if_none(self.split_tax_amount_a) + _zero_if_none(self.split_tax_amount_b)
        return _zero_if_none(self.primary_tax_amount)


def _zero_if_none(value: Decimal | None) -> Decimal:
    return value if value is not None else Decimal(0)


def _round(value: Decimal) -> Decimal:
    return value.quantize(CENTS, rounding=ROUND_HALF_UP)


def _stored(value: Decimal | None) -> Decimal | None:
    """Round a derived value, clearing anything non-finite, negative or too large to hold in cents."""
    if value is None or not value.is_finite() or value < 0:
        return None
    try:
        return _round(value)
    except InvalidOperation:
        logger.debug("Clearing derived value %s, it cannot be rounded to cents", value)
        return None


def _non_zero(value: Decimal | None) -> Decimal | None:
    # A zero tax component is displayed as blank, not as 0.00.
    if value is None or value == 0:
        return None
    return value


def _back_solve(tax: Decimal | None, rate: Decimal | None, factor: Decimal) -> Decimal | None:
    if tax is None or rate is None or rate == 0:
        return None
    return _stored(tax * factor / rate)


def _total(fields: TaxFieldSet, taxable_value: Decimal | None, tax: Decimal) -> Decimal | None:
    if taxable_value is None and tax == 0 and fields.cess_amount is None:
        return None
    return _stored(_zero_if_none(taxable_value) + tax + _zero_if_none(fields.cess_amount))


def _forward(fields: TaxFieldSet) -> TaxFieldSet:
    base = _zero_if_none(fields.taxable_value)
    rate = _zero_if_none(fields.tax_rate_percent)

    if fields.is_split:
        half = _non_zero(_stored(base * rate / TWO_HUNDRED))
        update = {
            "primary_tax_amount": None,
            "split_tax_amount_a": half,
            "split_tax_amount_b": half,
        }
        tax = 2 * _zero_if_none(half)
    else:
        component = _non_zero(_stored(base * rate / HUNDRED))
        update = {
            "primary_tax_amount": component,
            "split_tax_amount_a": None,
            "split_tax_amount_b": None,
        }
        tax = _zero_if_none(component)

    update["total"] = _total(fields, fields.taxable_value, tax)
    return fields.model_copy(update=update)


def _from_primary(fields: TaxFieldSet) -> TaxFieldSet:
    taxable_value = _back_solve(fields.primary_tax_amount, fields.tax_rate_percent, HUNDRED)
    if taxable_value is None:
        logger.debug("Cannot back-solve taxable value from primary tax at rate %s", fields.tax_rate_percent)

    tax = _zero_if_none(fields.primary_tax_amount)
    return fields.model_copy(
        update={
            "taxable_value": taxable_value,
            "split_tax_amount_a": None,
            "split_tax_amount_b": None,
            "total": _total(fields, taxable_value, tax),
        }
    )


def _from_split(fields: TaxFieldSet) -> TaxFieldSet:
    a = fields.split_tax_amount_a
    b = fields.split_tax_amount_b
    combined = None if a is None and b is None else _zero_if_none(a) + _zero_if_none(b)
    taxable_value = _back_solve(combined, fields.tax_rate_percent, TWO_HUNDRED)
    if taxable_value is None:
        logger.debug("Cannot back-solve taxable value from split tax at rate %s", fields.tax_rate_percent)

    return fields.model_copy(
        update={
            "taxable_value": taxable_value,
            "primary_tax_amount": None,
            "total": _total(fields, taxable_value, _zero_if_none(combined)),
        }
    )


def _from_total(fields: TaxFieldSet) -> TaxFieldSet:
    # Tax amounts are kept as they are; the taxable value absorbs the difference.
    taxable_value: Decimal | None = None
    if fields.total is not None:
        remainder = fields.total - fields.held_tax() - _zero_if_none(fields.cess_amount)
        if remainder > 0:
            taxable_value = _stored(remainder)
    return fields.model_copy(update={"taxable_value": taxable_value})


_RESOLVERS: dict[TaxField, Callable[[TaxFieldSet], TaxFieldSet]] = {
    TaxField.TAXABLE_VALUE: _forward,
    TaxField.TAX_RATE_PERCENT: _forward,
    TaxField.PRIMARY_TAX_AMOUNT: _from_primary,
    TaxField.SPLIT_TAX_AMOUNT_A: _from_split,
    TaxField.SPLIT_TAX_AMOUNT_B: _from_split,
    TaxField.CESS_AMOUNT: _forward,
    TaxField.TOTAL: _from_total,
    TaxField.IS_SPLIT: _forward,
}


def resolve(fields: TaxFieldSet, edited_field: TaxField) -> TaxFieldSet:
    """Return a new field set made consistent with ``edited_field``.

    The input is never modified.
    """
    resolver = _RESOLVERS[TaxField(edited_field)]
    logger.debug("Resolving tax fields after edit of %s via %s", edited_field, resolver.__name__)
    return resolver(fields)
