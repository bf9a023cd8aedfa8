from __future__ import annotations

from typing import Iterable

from domain.ledger import BalancedEntry, LedgerSummary
from domain.tax import TaxField, TaxFieldSet

from .formatting import format_currency, format_optional_currency


def render_ledger(entries: Iterable[BalancedEntry], summary: LedgerSummary) -> str:
    rows_in = list(entries)
    lines = [
        f"Entries: {summary.entry_count}",
        f"Total debits:  {format_currency(summary.total_debits)}",
        f"Total credits: {format_currency(summary.total_credits)}",
        f"Balance:       {format_currency(summary.closing_balance)}",
        "",
    ]
    if not rows_in:
        lines.append("  (no entries)")
        return "\n".join(lines)

    rows: list[tuple[str, str, str, str, str, str]] = [
        (
            entry.occurred_at.isoformat(),
            entry.kind.value,
            entry.note,
            format_optional_currency(entry.debit_amount, blank=""),
            format_optional_currency(entry.credit_amount, blank=""),
            format_currency(entry.running_balance),
        )
        for entry in rows_in
    ]
    labels = ("Date", "Type", "Narration", "Debit", "Credit", "Balance")
    widths = [max(len(label), max(len(row[i]) for row in rows)) for i, label in enumerate(labels)]

    def _line(cells: tuple[str, ...]) -> str:
        left = [f"{cells[i]:<{widths[i]}}" for i in range(3)]
        right = [f"{cells[i]:>{widths[i]}}" for i in range(3, 6)]
        return " ".join(left + right).rstrip()

    header = _line(labels)
    lines.extend([header, "-" * len(header)])
    lines.extend(_line(row) for row in rows)
    return "\n".join(lines)


def render_tax_fields(fields: TaxFieldSet) -> str:
    labels = {
        TaxField.TAXABLE_VALUE: "Taxable value",
        TaxField.TAX_RATE_PERCENT: "Rate (%)",
        TaxField.PRIMARY_TAX_AMOUNT: "Integrated tax",
        TaxField.SPLIT_TAX_AMOUNT_A: "Central tax",
        TaxField.SPLIT_TAX_AMOUNT_B: "State/UT tax",
        TaxField.CESS_AMOUNT: "Cess",
        TaxField.TOTAL: "Total",
    }
    width = max(len(label) for label in labels.values())
    lines = [f"{'Split tax':<{width}} {'yes' if fields.is_split else 'no'}"]
    for field, label in labels.items():
        lines.append(f"{label:<{width}} {format_optional_currency(getattr(fields, field.value))}")
    return "\n".join(lines)
