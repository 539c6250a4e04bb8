# apps/clients/models.py
# ────────────────────────────────────────────────────────────────────
# Clients (partner schools), their programs and milestone payment plans
# ────────────────────────────────────────────────────────────────────
from __future__ import annotations

from decimal import Decimal

from django.db import models
from django.db.models import (
    CheckConstraint,
    DecimalField,
    ExpressionWrapper,
    F,
    OuterRef,
    Q,
    Subquery,
    Sum,
    Value,
)
from django.db.models.functions import Coalesce

from apps.corecode.models import Campus
from apps.corecode.money import _r2

MONEY = DecimalField(max_digits=14, decimal_places=2)


def _summed(qs, field: str) -> Coalesce:
    """Correlated ``SUM(field)`` per client, 0 when there are no rows."""
    sub = qs.filter(client=OuterRef("pk")).values("client").annotate(t=Sum(field)).values("t")[:1]
    return Coalesce(Subquery(sub, output_field=MONEY), Value(Decimal("0.00")), output_field=MONEY)


# ════════════════════════════════════════════════════════════════════
# Client
# ════════════════════════════════════════════════════════════════════
class ClientQuerySet(models.QuerySet):
    def with_totals(self):
        """
        Annotate every row with:

        • plan_total     – Σ payment-plan amounts
        • manual_total   – Σ amounts of live manual vouchers
        • total_amount   – plan_total + manual_total
        • total_paid     – Σ amount_paid over all vouchers
        • outstanding    – total_amount − total_paid
        """
        from apps.finance.models import Voucher

        vouchers = Voucher.objects.all()
        return (
            self.annotate(
                plan_total=_summed(PaymentPlan.objects.all(), "amount"),
                manual_total=_summed(
                    vouchers.filter(payment_plan__isnull=True, cancelled_at__isnull=True), "amount"
                ),
                total_paid=_summed(vouchers, "amount_paid"),
            )
            .annotate(
                total_amount=ExpressionWrapper(F("plan_total") + F("manual_total"), output_field=MONEY),
            )
            .annotate(
                outstanding=ExpressionWrapper(F("total_amount") - F("total_paid"), output_field=MONEY),
            )
        )


class Client(models.Model):
    """A partner school billed per seat, scoped to exactly one campus."""
    name          = models.CharField(max_length=200)
    director_name = models.CharField(max_length=200, blank=True)
    city          = models.CharField(max_length=120, blank=True)
    campus        = models.ForeignKey(Campus, on_delete=models.PROTECT, related_name="clients")
    seat_cost     = models.DecimalField(max_digits=12, decimal_places=2)

    # snapshot, refreshed from Program rows by signals
    total_seats   = models.PositiveIntegerField(default=0, editable=False)

    created_at    = models.DateTimeField(auto_now_add=True)
    updated_at    = models.DateTimeField(auto_now=True)

    objects = ClientQuerySet.as_manager()

    class Meta:
        ordering = ["name"]
        constraints = [
            CheckConstraint(condition=Q(seat_cost__gt=0), name="client_seat_cost_positive"),
        ]

    def __str__(self):
        return self.name

    # -- derived figures --------------------------------------------
    @property
    def contract_value(self) -> Decimal:
        """total_seats × seat_cost; compared against total_amount, never stored."""
        return _r2(self.total_seats * self.seat_cost)

    def refresh_total_seats(self, *, commit: bool = True) -> int:
        self.total_seats = self.programs.aggregate(t=Sum("seat_count"))["t"] or 0
        if commit:
            Client.objects.filter(pk=self.pk).update(total_seats=self.total_seats)
        return self.total_seats


# ════════════════════════════════════════════════════════════════════
# Program
# ════════════════════════════════════════════════════════════════════
class Program(models.Model):
    client       = models.ForeignKey(Client, on_delete=models.CASCADE, related_name="programs")
    program_name = models.CharField(max_length=200)
    seat_count   = models.PositiveIntegerField()
    created_at   = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["id"]
        constraints = [
            CheckConstraint(condition=Q(seat_count__gt=0), name="program_seat_count_positive"),
        ]

    def __str__(self):
        return f"{self.program_name} – {self.seat_count} seats"


# ════════════════════════════════════════════════════════════════════
# Payment plan (milestones)
# ════════════════════════════════════════════════════════════════════
class PaymentType(models.TextChoices):
    ADVANCE                = "advance",                "Advance"
    AFTER_PRE_REGISTRATION = "after_pre_registration", "After Pre-Registration"
    SUBMITTED_EXAMINATION  = "submitted_examination",  "Submitted Examination"
    ROLL_NUMBER_SLIP       = "roll_number_slip",       "Roll Number Slip"


class PaymentPlan(models.Model):
    """
    One milestone of a client's plan.  ``payment_type`` is normally one of
    :class:`PaymentType` but imported data may carry free text, so the
    field is not restricted to the choices.
    """
    client        = models.ForeignKey(Client, on_delete=models.CASCADE, related_name="payment_plan")
    payment_type  = models.CharField(max_length=100)
    amount        = models.DecimalField(max_digits=14, decimal_places=2)
    due_date      = models.DateField(null=True, blank=True)
    display_order = models.PositiveSmallIntegerField(default=0)
    created_at    = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["display_order", "id"]
        constraints = [
            CheckConstraint(condition=Q(amount__gt=0), name="plan_amount_positive"),
        ]

    @property
    def label(self) -> str:
        try:
            return PaymentType(self.payment_type).label
        except ValueError:
            return self.payment_type.replace("_", " ").title()

    def __str__(self):
        return f"{self.client} · {self.label} ({self.amount})"
