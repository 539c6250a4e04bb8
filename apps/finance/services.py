# apps/finance/services.py
"""
Voucher write paths.

Every function takes the acting ``Principal`` first, validates before its
first write, and runs inside ``transaction.atomic`` so a failure leaves no
partial mutation behind.  Errors are plain Django exceptions
(``ValidationError``, ``PermissionDenied``, ``<Model>.DoesNotExist``) or
``ConflictError``; the API layer maps them to HTTP statuses.
"""

from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import Case, IntegerField, Value, When
from django.utils import timezone
from django.utils.dateparse import parse_date

from accounts.principal import Principal
from apps.clients.models import Client, PaymentPlan
from apps.corecode.exceptions import ConflictError
from apps.corecode.money import ZERO, _r2, to_id, to_money

from .allocation import allocate_received
from .models import Voucher, VoucherPayment
from .status import VoucherStatus

logger = logging.getLogger(__name__)


# ────────────────────────────────────────────────────────────────────
# small parsers
# ────────────────────────────────────────────────────────────────────
def _date(value, field: str, *, default: date | None = None) -> date | None:
    if value in (None, ""):
        return default
    if isinstance(value, date):
        return value
    parsed = parse_date(str(value))
    if parsed is None:
        raise ValidationError({field: f"{field} must be a date (YYYY-MM-DD)."})
    return parsed


def _method(value) -> str:
    return (str(value).strip() if value else "") or settings.DEFAULT_PAYMENT_METHOD


def _lock(voucher_id) -> Voucher:
    """Fetch the voucher row with ``SELECT … FOR UPDATE``."""
    return Voucher.objects.select_for_update().select_related("client").get(pk=voucher_id)


def _get_client(principal: Principal, client_id) -> Client:
    client = Client.objects.get(pk=to_id(client_id, "client_id"))
    principal.ensure_can_write(campus_id=client.campus_id, client_id=client.pk)
    return client


# ════════════════════════════════════════════════════════════════════
# 1.  Payment recording
# ════════════════════════════════════════════════════════════════════
def record_payment(
    principal: Principal,
    voucher_id,
    amount,
    *,
    payment_method=None,
    payment_date=None,
    notes: str = "",
) -> tuple[Voucher, VoucherPayment]:
    """Add *amount* to the voucher's ``amount_paid`` (never past its balance)."""
    amount = to_money(amount, "payment_amount")
    paid_on = _date(payment_date, "payment_date", default=timezone.localdate())

    with transaction.atomic():
        voucher = _lock(voucher_id)
        principal.ensure_can_write(campus_id=voucher.campus_id, client_id=voucher.client_id)

        if voucher.is_cancelled:
            raise ValidationError("Cannot record a payment on a cancelled voucher.")
        if amount > voucher.balance:
            raise ValidationError(
                {"payment_amount": f"Payment of {amount:,.2f} exceeds the remaining balance of {voucher.balance:,.2f}."}
            )

        payment = VoucherPayment.objects.create(
            voucher=voucher,
            amount=amount,
            payment_date=paid_on,
            payment_method=_method(payment_method),
            notes=notes or "",
            recorded_by_id=principal.user_id,
        )
        voucher.amount_paid = _r2(voucher.amount_paid + amount)
        voucher.save(update_fields=["amount_paid"])

    logger.info(
        "Payment %s of %s recorded on %s by %s (status → %s)",
        payment.pk, amount, voucher.voucher_number, principal.name, voucher.status,
    )
    return voucher, payment


def edit_payment(principal: Principal, voucher_id, payment_id, data: dict) -> tuple[Voucher, VoucherPayment]:
    """
    Correct one recorded increment.  ``amount_paid`` is rebuilt from the
    payment rows and must stay within ``[0, amount]``.
    """
    with transaction.atomic():
        voucher = _lock(voucher_id)
        principal.ensure_can_write(campus_id=voucher.campus_id, client_id=voucher.client_id)
        payment = voucher.payments.get(pk=payment_id)

        if voucher.is_cancelled:
            raise ValidationError("Cannot edit payments on a cancelled voucher.")

        if "amount" in data:
            payment.amount = to_money(data["amount"], "amount")
        if "payment_method" in data:
            payment.payment_method = _method(data["payment_method"])
        if "payment_date" in data:
            payment.payment_date = _date(data["payment_date"], "payment_date", default=payment.payment_date)
        if "notes" in data:
            payment.notes = data["notes"] or ""

        others = voucher.payments.exclude(pk=payment.pk)
        new_paid = _r2(sum((p.amount for p in others), ZERO) + payment.amount)
        if new_paid > voucher.amount:
            raise ValidationError(
                {"amount": f"Payments would total {new_paid:,.2f}, above the voucher amount of {voucher.amount:,.2f}."}
            )

        payment.save()
        voucher.amount_paid = new_paid
        voucher.save(update_fields=["amount_paid"])

    logger.info("Payment %s on %s edited by %s", payment.pk, voucher.voucher_number, principal.name)
    return voucher, payment


def record_client_payment(
    principal: Principal,
    client_id,
    amount,
    *,
    payment_method=None,
    payment_date=None,
    notes: str = "",
) -> list[tuple[Voucher, VoucherPayment]]:
    """
    Spread one lump sum greedily over the client's open vouchers:
    milestone order first, then manual vouchers by creation time.
    """
    amount = to_money(amount, "amount")
    paid_on = _date(payment_date, "payment_date", default=timezone.localdate())
    method = _method(payment_method)

    with transaction.atomic():
        client = _get_client(principal, client_id)
        vouchers = list(
            Voucher.objects.select_for_update(of=("self",))
            .filter(client=client, cancelled_at__isnull=True)
            .exclude(status=VoucherStatus.PAID)
            .annotate(
                manual=Case(When(payment_plan__isnull=True, then=Value(1)), default=Value(0),
                            output_field=IntegerField()),
            )
            .order_by("manual", "payment_plan__display_order", "created_at", "id")
        )
        outstanding = sum((v.balance for v in vouchers), ZERO)
        if amount > outstanding:
            raise ValidationError(
                {"amount": f"Amount of {amount:,.2f} exceeds the client's open voucher balance of {outstanding:,.2f}."}
            )

        applied = []
        for voucher, share in zip(vouchers, allocate_received(amount, [v.balance for v in vouchers])):
            if share <= 0:
                continue
            payment = VoucherPayment.objects.create(
                voucher=voucher,
                amount=share,
                payment_date=paid_on,
                payment_method=method,
                notes=notes or "",
                recorded_by_id=principal.user_id,
            )
            voucher.amount_paid = _r2(voucher.amount_paid + share)
            voucher.save(update_fields=["amount_paid"])
            applied.append((voucher, payment))

    logger.info(
        "Lump sum %s for client %s spread over %d voucher(s) by %s",
        amount, client.pk, len(applied), principal.name,
    )
    return applied


# ════════════════════════════════════════════════════════════════════
# 2.  Voucher generation
# ════════════════════════════════════════════════════════════════════
def generate_from_milestone(principal: Principal, client_id, payment_plan_id, *, due_date=None) -> Voucher:
    """Issue the voucher for one milestone; 409 when it already has a live one."""
    payment_plan_id = to_id(payment_plan_id, "payment_plan_id")
    due = _date(due_date, "due_date")

    with transaction.atomic():
        client = _get_client(principal, client_id)
        milestone = PaymentPlan.objects.select_for_update().get(pk=payment_plan_id, client=client)

        existing = Voucher.objects.live().filter(payment_plan=milestone).first()
        if existing is not None:
            raise ConflictError(
                "A voucher has already been generated for this milestone.",
                voucher_id=existing.pk,
                voucher_number=existing.voucher_number,
            )

        voucher = Voucher.objects.create(
            client=client,
            campus_id=client.campus_id,
            payment_plan=milestone,
            amount=milestone.amount,
            due_date=due or milestone.due_date,
            generated_by_id=principal.user_id,
        )

    logger.info(
        "Voucher %s generated for %s / %s (%s) by %s",
        voucher.voucher_number, client, milestone.payment_type, voucher.amount, principal.name,
    )
    return voucher


def create_manual_voucher(
    principal: Principal,
    client_id,
    amount,
    *,
    label: str = "",
    due_date=None,
    amount_paid=None,
    payment_method=None,
) -> Voucher:
    """Free-form voucher (no milestone), optionally with an initial payment."""
    amount = to_money(amount, "amount")
    due = _date(due_date, "due_date")
    initial = ZERO
    if amount_paid not in (None, ""):
        initial = to_money(amount_paid, "amount_paid", allow_zero=True)
        if initial > amount:
            raise ValidationError({"amount_paid": "Initial payment cannot exceed the voucher amount."})

    with transaction.atomic():
        client = _get_client(principal, client_id)
        voucher = Voucher.objects.create(
            client=client,
            campus_id=client.campus_id,
            label=(label or "").strip(),
            amount=amount,
            due_date=due,
            generated_by_id=principal.user_id,
        )
        if initial > 0:
            VoucherPayment.objects.create(
                voucher=voucher,
                amount=initial,
                payment_method=_method(payment_method),
                notes="Initial payment",
                recorded_by_id=principal.user_id,
            )
            voucher.amount_paid = initial
            voucher.save(update_fields=["amount_paid"])

    logger.info(
        "Manual voucher %s (%s, paid %s) created for %s by %s",
        voucher.voucher_number, amount, initial, client, principal.name,
    )
    return voucher


# ════════════════════════════════════════════════════════════════════
# 3.  Cancellation / status patch / delete
# ════════════════════════════════════════════════════════════════════
def cancel_voucher(principal: Principal, voucher_id) -> Voucher:
    """Terminal.  Paid or already-cancelled vouchers are refused."""
    with transaction.atomic():
        voucher = _lock(voucher_id)
        principal.ensure_can_write(campus_id=voucher.campus_id, client_id=voucher.client_id)

        if voucher.is_cancelled:
            raise ValidationError("Voucher is already cancelled.")
        if voucher.status == VoucherStatus.PAID:
            raise ValidationError("A fully paid voucher cannot be cancelled.")

        voucher.cancelled_at = timezone.now()
        voucher.save(update_fields=["cancelled_at"])

    logger.info("Voucher %s cancelled by %s", voucher.voucher_number, principal.name)
    return voucher


def set_status(principal: Principal, voucher_id, new_status, *, payment_method=None) -> Voucher:
    """
    ``cancelled`` cancels; ``paid`` settles the balance as one payment.
    ``pending`` / ``partial`` follow from the amounts and cannot be forced.
    """
    if new_status == VoucherStatus.CANCELLED:
        return cancel_voucher(principal, voucher_id)
    if new_status == VoucherStatus.PAID:
        with transaction.atomic():
            voucher = _lock(voucher_id)
            principal.ensure_can_write(campus_id=voucher.campus_id, client_id=voucher.client_id)
            if voucher.status == VoucherStatus.PAID:
                return voucher
            voucher, _ = record_payment(
                principal, voucher.pk, voucher.balance,
                payment_method=payment_method, notes="Marked as paid",
            )
        return voucher
    if new_status in (VoucherStatus.PENDING, VoucherStatus.PARTIAL):
        raise ValidationError({"status": f"'{new_status}' is derived from the amounts and cannot be set directly."})
    raise ValidationError({"status": f"Unknown status '{new_status}'."})


def delete_voucher(principal: Principal, voucher_id) -> None:
    with transaction.atomic():
        voucher = _lock(voucher_id)
        principal.ensure_can_write(campus_id=voucher.campus_id, client_id=voucher.client_id)
        number = voucher.voucher_number
        voucher.delete()
    logger.info("Voucher %s deleted by %s", number, principal.name)


# ════════════════════════════════════════════════════════════════════
# 4.  Consistency
# ════════════════════════════════════════════════════════════════════
def sync_voucher(voucher: Voucher) -> bool:
    """
    Rebuild ``amount_paid`` from payment rows (capped at the amount) and
    re-derive status.  Returns True when the row changed.
    """
    paid = min(voucher.payments_total(), voucher.amount)
    before = (voucher.amount_paid, voucher.status)
    voucher.amount_paid = _r2(paid)
    voucher.save(update_fields=["amount_paid"])
    changed = before != (voucher.amount_paid, voucher.status)
    if changed:
        logger.debug("Voucher %s synced: %s → %s", voucher.voucher_number, before, (voucher.amount_paid, voucher.status))
    return changed


def client_balance(client: Client) -> Decimal:
    """Outstanding for one client: total_amount − Σ amount_paid."""
    row = Client.objects.with_totals().values("outstanding").get(pk=client.pk)
    return _r2(row["outstanding"])
