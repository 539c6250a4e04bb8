# apps/corecode/money.py
"""Decimal and id parsing shared by the fee apps (amounts are PKR, 2 dp)."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from django.core.exceptions import ValidationError

ZERO = Decimal("0.00")


def _r2(value) -> Decimal:
    return Decimal(value).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


def to_money(value, field: str = "amount", *, positive: bool = True, allow_zero: bool = False) -> Decimal:
    """
    Parse *value* (str / int / float / Decimal) into a 2-dp Decimal.

    Raises ``ValidationError`` keyed on *field* when the value is missing,
    not numeric, or not positive.
    """
    if value is None or value == "":
        raise ValidationError({field: f"{field} is required."})
    try:
        amount = _r2(str(value).replace(",", ""))
    except (InvalidOperation, ValueError):
        raise ValidationError({field: f"{field} must be a number."})
    if not amount.is_finite():
        raise ValidationError({field: f"{field} must be a number."})
    if positive:
        if amount < 0 or (amount == 0 and not allow_zero):
            raise ValidationError({field: f"{field} must be greater than 0."})
    return amount


def to_id(value, field: str) -> int:
    """Primary key from request data; junk is a ``ValidationError``, never a 500."""
    if value is None or value == "":
        raise ValidationError({field: f"{field} is required."})
    try:
        pk = int(str(value).strip())
    except (TypeError, ValueError):
        raise ValidationError({field: f"{field} must be a whole number."})
    if pk <= 0:
        raise ValidationError({field: f"{field} must be a whole number."})
    return pk
