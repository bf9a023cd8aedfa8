from decimal import Decimal

import pytest
from pydantic import ValidationError

from domain.tax import _RESOLVERS, TaxField, TaxFieldSet, resolve


def _d(value: str) -> Decimal:
    return Decimal(value)


def test_forward_single_component() -> None:
    fields = TaxFieldSet(taxable_value=_d("1000"), tax_rate_percent=_d("18"))

    result = resolve(fields, TaxField.TAXABLE_VALUE)

    assert result.primary_tax_amount == _d("180.00")
    assert result.split_tax_amount_a is None
    assert result.split_tax_amount_b is None
    assert result.total == _d("1180.00")
    assert result.taxable_value == _d("1000")


def test_forward_adds_cess_to_total() -> None:
    fields = TaxFieldSet(taxable_value=_d("1000"), tax_rate_percent=_d("18"), cess_amount=_d("25.50"))

    result = resolve(fields, TaxField.TAX_RATE_PERCENT)

    assert result.primary_tax_amount == _d("180.00")
    assert result.total == _d("1205.50")
    assert result.cess_amount == _d("25.50")


def test_forward_split_components() -> None:
    fields = TaxFieldSet(taxable_value=_d("1000"), tax_rate_percent=_d("18"), is_split=True)

    result = resolve(fields, TaxField.TAXABLE_VALUE)

    assert result.split_tax_amount_a == _d("90.00")
    assert result.split_tax_amount_b == _d("90.00")
    assert result.primary_tax_amount is None
    assert result.total == _d("1180.00")


def test_forward_rounds_to_cents() -> None:
    fields = TaxFieldSet(taxable_value=_d("333.33"), tax_rate_percent=_d("5"), is_split=True)

    result = resolve(fields, TaxField.TAXABLE_VALUE)

    # 333.33 * 5 / 200 = 8.33325
    assert result.split_tax_amount_a == _d("8.33")
    assert result.split_tax_amount_b == _d("8.33")
    assert result.total == _d("349.99")


def test_forward_clears_zero_tax() -> None:
    fields = TaxFieldSet(
        taxable_value=_d("500"),
        tax_rate_percent=_d("0"),
        primary_tax_amount=_d("12"),
    )

    result = resolve(fields, TaxField.TAX_RATE_PERCENT)

    assert result.primary_tax_amount is None
    assert result.total == _d("500.00")


def test_forward_without_any_values_leaves_total_cleared() -> None:
    result = resolve(TaxFieldSet(), TaxField.TAXABLE_VALUE)

    assert result.total is None
    assert result.primary_tax_amount is None


def test_toggling_split_redistributes_tax() -> None:
    single = resolve(TaxFieldSet(taxable_value=_d("1000"), tax_rate_percent=_d("18")), TaxField.TAXABLE_VALUE)

    split = resolve(single.model_copy(update={"is_split": True}), TaxField.IS_SPLIT)

    assert split.primary_tax_amount is None
    assert split.split_tax_amount_a == split.split_tax_amount_b == _d("90.00")
    assert split.total == single.total

    back = resolve(split.model_copy(update={"is_split": False}), TaxField.IS_SPLIT)

    assert back == single


def test_editing_cess_recomputes_total() -> None:
    fields = resolve(TaxFieldSet(taxable_value=_d("1000"), tax_rate_percent=_d("18")), TaxField.TAXABLE_VALUE)

    result = resolve(fields.model_copy(update={"cess_amount": _d("20")}), TaxField.CESS_AMOUNT)

    assert result.total == _d("1200.00")
    assert result.primary_tax_amount == _d("180.00")


def test_primary_tax_back_solves_taxable_value() -> None:
    forward = resolve(TaxFieldSet(taxable_value=_d("1000"), tax_rate_percent=_d("18")), TaxField.TAXABLE_VALUE)

    result = resolve(forward.model_copy(update={"primary_tax_amount": _d("180.00")}), TaxField.PRIMARY_TAX_AMOUNT)

    assert result.taxable_value == _d("1000.00")
    assert result.total == _d("1180.00")


def test_primary_tax_edit_clears_split_fields() -> None:
    fields = TaxFieldSet(
        tax_rate_percent=_d("12"),
        primary_tax_amount=_d("60"),
        split_tax_amount_a=_d("1"),
        split_tax_amount_b=_d("1"),
        cess_amount=_d("5"),
    )

    result = resolve(fields, TaxField.PRIMARY_TAX_AMOUNT)

    assert result.taxable_value == _d("500.00")
    assert result.split_tax_amount_a is None
    assert result.split_tax_amount_b is None
    assert result.total == _d("565.00")


def test_zero_rate_back_solve_clears_taxable_value() -> None:
    fields = resolve(TaxFieldSet(taxable_value=_d("1000"), tax_rate_percent=_d("0")), TaxField.TAXABLE_VALUE)

    result = resolve(fields.model_copy(update={"primary_tax_amount": _d("50")}), TaxField.PRIMARY_TAX_AMOUNT)

    assert result.taxable_value is None
    assert result.total == _d("50.00")


def test_missing_rate_back_solve_clears_taxable_value() -> None:
    fields = TaxFieldSet(taxable_value=_d("10"), split_tax_amount_a=_d("9"), is_split=True)

    result = resolve(fields, TaxField.SPLIT_TAX_AMOUNT_A)

    assert result.taxable_value is None


def test_split_tax_back_solve_uses_combined_components() -> None:
    fields = TaxFieldSet(
        tax_rate_percent=_d("18"),
        primary_tax_amount=_d("3"),
        split_tax_amount_a=_d("45"),
        split_tax_amount_b=_d("45"),
        is_split=True,
    )

    result = resolve(fields, TaxField.SPLIT_TAX_AMOUNT_B)

    # (45 + 45) * 200 / 18
    assert result.taxable_value == _d("1000.00")
    assert result.primary_tax_amount is None
    assert result.total == _d("1090.00")


def test_total_edit_back_solves_taxable_value_only() -> None:
    forward = resolve(
        TaxFieldSet(taxable_value=_d("1000"), tax_rate_percent=_d("18"), cess_amount=_d("10")),
        TaxField.TAXABLE_VALUE,
    )

    result = resolve(forward.model_copy(update={"total": _d("1290")}), TaxField.TOTAL)

    assert result.taxable_value == _d("1100.00")
    # Tax amounts are not recomputed from the new taxable value.
    assert result.primary_tax_amount == _d("180.00")
    assert result.total == _d("1290")


def test_total_edit_then_taxable_edit_does_not_round_trip() -> None:
    forward = resolve(TaxFieldSet(taxable_value=_d("1000"), tax_rate_percent=_d("18")), TaxField.TAXABLE_VALUE)
    after_total = resolve(forward.model_copy(update={"total": _d("1298")}), TaxField.TOTAL)

    assert after_total.taxable_value == _d("1118.00")

    reforwarded = resolve(after_total, TaxField.TAXABLE_VALUE)

    assert reforwarded.primary_tax_amount == _d("201.24")
    assert reforwarded.total == _d("1319.24")
    assert reforwarded.total != after_total.total


def test_total_edit_uses_split_amounts_when_split() -> None:
    fields = TaxFieldSet(
        tax_rate_percent=_d("18"),
        primary_tax_amount=_d("999"),
        split_tax_amount_a=_d("90"),
        split_tax_amount_b=_d("90"),
        total=_d("1180"),
        is_split=True,
    )

    result = resolve(fields, TaxField.TOTAL)

    assert result.taxable_value == _d("1000.00")


@pytest.mark.parametrize("total", [_d("100"), _d("180"), None])
def test_total_edit_clears_non_positive_taxable_value(total: Decimal | None) -> None:
    fields = TaxFieldSet(tax_rate_percent=_d("18"), primary_tax_amount=_d("180"), taxable_value=_d("1000"), total=total)

    result = resolve(fields, TaxField.TOTAL)

    assert result.taxable_value is None


def test_resolve_does_not_modify_input() -> None:
    fields = TaxFieldSet(taxable_value=_d("1000"), tax_rate_percent=_d("18"))
    snapshot = fields.model_copy()

    resolve(fields, TaxField.TAXABLE_VALUE)

    assert fields == snapshot


def test_resolve_accepts_field_name() -> None:
    fields = TaxFieldSet(taxable_value=_d("200"), tax_rate_percent=_d("5"))

    assert resolve(fields, "taxable_value") == resolve(fields, TaxField.TAXABLE_VALUE)  # type: ignore[arg-type]


def test_resolve_rejects_unknown_field() -> None:
    with pytest.raises(ValueError):
        resolve(TaxFieldSet(), "discount")  # type: ignore[arg-type]


@pytest.mark.parametrize(
    "edited_field",
    [TaxField.TAXABLE_VALUE, TaxField.PRIMARY_TAX_AMOUNT, TaxField.SPLIT_TAX_AMOUNT_A, TaxField.IS_SPLIT],
)
@pytest.mark.parametrize("is_split", [False, True])
def test_total_matches_components_after_resolution(edited_field: TaxField, is_split: bool) -> None:
    fields = TaxFieldSet(
        taxable_value=_d("1234.56"),
        tax_rate_percent=_d("28"),
        primary_tax_amount=_d("345.68"),
        split_tax_amount_a=_d("172.84"),
        split_tax_amount_b=_d("172.84"),
        cess_amount=_d("12.34"),
        is_split=is_split,
    )

    result = resolve(fields, edited_field)

    parts = [
        result.taxable_value,
        result.primary_tax_amount,
        result.split_tax_amount_a,
        result.split_tax_amount_b,
        result.cess_amount,
    ]
    expected = sum((p for p in parts if p is not None), start=Decimal(0))
    assert result.total is not None
    assert abs(result.total - expected) <= _d("0.01")


def test_field_set_rejects_negative_amounts() -> None:
    with pytest.raises(ValidationError):
        TaxFieldSet(taxable_value=_d("-1"))


def test_field_set_rejects_nan() -> None:
    with pytest.raises(ValidationError):
        TaxFieldSet(total=Decimal("NaN"))


def test_every_editable_field_has_a_resolver() -> None:
    assert set(_RESOLVERS) == set(TaxField)


def test_back_solve_too_large_to_hold_in_cents_is_cleared() -> None:
    fields = TaxFieldSet(tax_rate_percent=_d("0.000001"), primary_tax_amount=_d("1e20"))

    result = resolve(fields, TaxField.PRIMARY_TAX_AMOUNT)

    assert result.taxable_value is None
    assert result.total == _d("1e20")


def test_forward_too_large_to_hold_in_cents_is_cleared() -> None:
    fields = TaxFieldSet(taxable_value=_d("1e28"), tax_rate_percent=_d("18"), is_split=True)

    result = resolve(fields, TaxField.TAXABLE_VALUE)

    assert result.split_tax_amount_a is None
    assert result.split_tax_amount_b is None
    assert result.total is None


def test_total_edit_too_large_to_hold_in_cents_clears_taxable_value() -> None:
    fields = TaxFieldSet(total=_d("1e30"), primary_tax_amount=_d("1"))

    result = resolve(fields, TaxField.TOTAL)

    assert result.taxable_value is None
