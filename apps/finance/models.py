# apps/finance/models.py
# Vouchers (fee installments) and the payments recorded against them
from __future__ import annotations

import logging
from decimal import Decimal

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models, transaction
from django.db.models import CheckConstraint, F, Q, Sum, UniqueConstraint
from django.utils import timezone

from apps.clients.models import Client, PaymentPlan
from apps.corecode.models import Campus
from apps.corecode.money import ZERO, _r2

from .status import OPEN_STATUSES, VoucherStatus, derive_status

logger = logging.getLogger(__name__)


def next_voucher_number(campus_id: int, year: int | None = None) -> str:
    """
    ``VOC-<campus>-<year>-<NNNN>``; the serial runs per campus per year.

    Must be called inside a transaction: the campus row is locked so two
    concurrent generators cannot pick the same serial.
    """
    year = year or timezone.localdate().year
    prefix = f"{settings.VOUCHER_NUMBER_PREFIX}-{campus_id}-{year}-"

    Campus.objects.select_for_update().filter(pk=campus_id).first()

    serials = [
        int(tail)
        for tail in (
            n.removeprefix(prefix)
            for n in Voucher.objects.filter(voucher_number__startswith=prefix)
                                    .values_list("voucher_number", flat=True)
        )
        if tail.isdigit()
    ]
    return f"{prefix}{max(serials, default=0) + 1:04d}"


# ════════════════════════════════════════════════════════════════════
# Voucher
# ════════════════════════════════════════════════════════════════════
class VoucherQuerySet(models.QuerySet):
    def live(self):
        return self.filter(cancelled_at__isnull=True)

    def open(self):
        return self.filter(status__in=OPEN_STATUSES)

    def overdue(self, today=None):
        today = today or timezone.localdate()
        return self.open().filter(due_date__lt=today)


class Voucher(models.Model):
    """
    One billable installment.  Milestone vouchers point at a
    ``PaymentPlan`` row; manual vouchers leave ``payment_plan`` empty and
    carry a free-text ``label``.
    """
    # ---------- identity ----------
    voucher_number = models.CharField(max_length=60, unique=True, blank=True)
    client         = models.ForeignKey(Client, on_delete=models.CASCADE, related_name="vouchers")
    campus         = models.ForeignKey(Campus, on_delete=models.PROTECT, related_name="vouchers")
    payment_plan   = models.ForeignKey(
        PaymentPlan, on_delete=models.SET_NULL, null=True, blank=True, related_name="vouchers"
    )
    label          = models.CharField(max_length=200, blank=True)

    # ---------- money ----------
    amount       = models.DecimalField(max_digits=14, decimal_places=2)
    amount_paid  = models.DecimalField(max_digits=14, decimal_places=2, default=ZERO)
    status       = models.CharField(
        max_length=10, choices=VoucherStatus.choices, default=VoucherStatus.PENDING, editable=False
    )
    due_date     = models.DateField(null=True, blank=True)
    cancelled_at = models.DateTimeField(null=True, blank=True)

    # ---------- bookkeeping ----------
    generated_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True,
        related_name="generated_vouchers",
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = VoucherQuerySet.as_manager()

    class Meta:
        ordering    = ["-created_at", "-id"]
        constraints = [
            CheckConstraint(condition=Q(amount__gt=0), name="voucher_amount_positive"),
            CheckConstraint(condition=Q(amount_paid__gte=0), name="voucher_paid_nonneg"),
            CheckConstraint(condition=Q(amount_paid__lte=F("amount")), name="voucher_paid_within_amount"),
            UniqueConstraint(
                fields=["payment_plan"],
                condition=Q(cancelled_at__isnull=True, payment_plan__isnull=False),
                name="one_live_voucher_per_milestone",
            ),
        ]
        indexes = [
            models.Index(fields=["campus", "status"], name="voucher_campus_status_idx"),
            models.Index(fields=["client", "status"], name="voucher_client_status_idx"),
        ]

    # ───────────────────────────────────────────────────────────
    # helpers
    # ───────────────────────────────────────────────────────────
    @property
    def balance(self) -> Decimal:
        return _r2(self.amount - self.amount_paid)

    @property
    def is_cancelled(self) -> bool:
        return self.cancelled_at is not None

    @property
    def is_manual(self) -> bool:
        return self.payment_plan_id is None

    @property
    def description(self) -> str:
        if self.label:
            return self.label
        return self.payment_plan.label if self.payment_plan_id else "Manual voucher"

    def is_overdue(self, today=None) -> bool:
        today = today or timezone.localdate()
        return self.status in OPEN_STATUSES and self.due_date is not None and self.due_date < today

    def payments_total(self) -> Decimal:
        return self.payments.aggregate(t=Sum("amount"))["t"] or ZERO

    # ───────────────────────────────────────────────────────────
    # validation
    # ───────────────────────────────────────────────────────────
    def clean(self):
        if self.amount is None or self.amount <= 0:
            raise ValidationError({"amount": "Voucher amount must be greater than 0."})
        if self.amount_paid < 0:
            raise ValidationError({"amount_paid": "Amount paid cannot be negative."})
        if self.amount_paid > self.amount:
            raise ValidationError({"amount_paid": "Amount paid cannot exceed the voucher amount."})
        if self.campus_id and self.client_id and self.client.campus_id != self.campus_id:
            raise ValidationError({"campus": "Voucher campus must match the client's campus."})
        if self.payment_plan_id and self.payment_plan.client_id != self.client_id:
            raise ValidationError({"payment_plan": "Milestone belongs to a different client."})

    # ───────────────────────────────────────────────────────────
    # save()
    # ───────────────────────────────────────────────────────────
    def save(self, *args, **kwargs):
        self.amount = _r2(self.amount)
        self.amount_paid = _r2(self.amount_paid or 0)
        self.status = derive_status(self.amount, self.amount_paid, self.is_cancelled)

        update_fields = kwargs.get("update_fields")
        if update_fields is not None:
            kwargs["update_fields"] = {*update_fields, "status", "updated_at"}

        with transaction.atomic():
            if not self.voucher_number:
                self.voucher_number = next_voucher_number(self.campus_id)
            self.clean()
            super().save(*args, **kwargs)

    def __str__(self): return self.voucher_number or "<voucher>"


# ════════════════════════════════════════════════════════════════════
# Payment increments
# ════════════════════════════════════════════════════════════════════
class VoucherPayment(models.Model):
    """One money-in event against a voucher (method, date and notes per increment)."""
    voucher        = models.ForeignKey(Voucher, on_delete=models.CASCADE, related_name="payments")
    amount         = models.DecimalField(max_digits=14, decimal_places=2)
    payment_date   = models.DateField(default=timezone.localdate)
    payment_method = models.CharField(max_length=50, default="Cash")
    notes          = models.TextField(blank=True)
    recorded_by    = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True,
        related_name="recorded_payments",
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering    = ["payment_date", "id"]
        constraints = [
            CheckConstraint(condition=Q(amount__gt=0), name="voucher_payment_positive"),
        ]

    def save(self, *args, **kwargs):
        self.amount = _r2(self.amount)
        super().save(*args, **kwargs)

    def __str__(self): return f"{self.voucher} – {self.amount:,.2f} ({self.payment_method})"
