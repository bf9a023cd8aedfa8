from __future__ import annotations

from decimal import Decimal


def format_currency(value: Decimal) -> str:
    cents = value.quantize(Decimal("0.01"))
    return f"{cents:.2f}"


def format_optional_currency(value: Decimal | None, *, blank: str = "-") -> str:
    if value is None:
        return blank
    return format_currency(value)
