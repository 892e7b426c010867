# Overview: Integer-cent money helpers shared by models and request validation.

"""Integer-cent money helpers. Amounts never pass through binary floats."""

from __future__ import annotations

from decimal import Decimal, InvalidOperation

CENT = Decimal("0.01")


def cents_to_decimal(cents: int | None) -> Decimal | None:
    if cents is None:
        return None
    return (Decimal(cents) / 100).quantize(CENT)


def decimal_to_cents(value) -> int:
    """
    Convert a user-supplied amount (int, float, str or Decimal) to cents.

    Floats are read through ``str`` so 12.5 means 12.50, not its binary
    approximation. Raises ValueError for non-numeric input or for more
    than two decimal places.
    """
    if isinstance(value, bool):
        raise ValueError("amount must be a number")
    try:
        amount = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        raise ValueError("amount must be a number")
    if not amount.is_finite():
        raise ValueError("amount must be a number")
    try:
        exact = amount == amount.quantize(CENT)
    except InvalidOperation:
        # Too many digits to hold at cent precision
        raise ValueError("amount is too large")
    if not exact:
        raise ValueError("amount cannot have more than two decimal places")
    return int(amount * 100)
