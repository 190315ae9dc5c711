"""Money helpers - amounts are integer cents, rates are Decimals"""

import re
from decimal import Decimal, ROUND_HALF_UP, InvalidOperation
from typing import Union

from edunexia_charges.domain.exceptions import ChargeValidationError

CENT = Decimal("0.01")

_NON_DIGITS = re.compile(r"\D")


def to_cents(amount: Union[Decimal, str, int], field: str = "value") -> int:
    """Convert a reais amount to cents, rounding half-up"""
    try:
        value = Decimal(str(amount))
    except InvalidOperation as e:
        raise ChargeValidationError(field, f"Invalid amount: {amount!r}") from e
    if value < 0:
        raise ChargeValidationError(field, "Amount cannot be negative")
    return int((value * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def from_cents(cents: int) -> Decimal:
    """Convert cents to a 2-place reais Decimal"""
    return (Decimal(cents) / 100).quantize(CENT)


def round_cents(value: Decimal) -> int:
    """Round a fractional cents amount to whole cents (half-up)"""
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def parse_currency_input(text: str) -> int:
    """
    Read a masked currency input as cents.

    Only digits are kept, so "R$ 1.234,56" -> 123456 and "" -> 0.
    """
    digits = _NON_DIGITS.sub("", text or "")
    return int(digits) if digits else 0


def format_brl(cents: int) -> str:
    """Render cents as Brazilian currency, e.g. 123456 -> 'R$ 1.234,56'"""
    sign = "-" if cents < 0 else ""
    reais, centavos = divmod(abs(cents), 100)
    grouped = f"{reais:,}".replace(",", ".")
    return f"{sign}R$ {grouped},{centavos:02d}"
