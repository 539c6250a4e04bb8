# apps/finance/status.py
from __future__ import annotations

from decimal import Decimal

from django.db import models


class VoucherStatus(models.TextChoices):
    PENDING   = "pending",   "Pending"
    PARTIAL   = "partial",   "Partially paid"
    PAID      = "paid",      "Paid"
    CANCELLED = "cancelled", "Cancelled"


# still owe money
OPEN_STATUSES = (VoucherStatus.PENDING, VoucherStatus.PARTIAL)


def derive_status(amount: Decimal, amount_paid: Decimal, cancelled: bool) -> str:
    """
    cancelled → paid → partial → pending, in that order of precedence.

    Pure; the stored ``Voucher.status`` is always re-derived from this on save.
    """
    if cancelled:
        return VoucherStatus.CANCELLED
    if amount_paid >= amount:
        return VoucherStatus.PAID
    if amount_paid > 0:
        return VoucherStatus.PARTIAL
    return VoucherStatus.PENDING
