# apps/finance/ledger.py
"""
VoucherLedger ➜ money billed, collected and still owed, per request
--------------------------------------------------------------------
Every figure is recomputed from the voucher rows the principal may see;
nothing is cached between requests.

• total_revenue     Σ amount_paid over non-cancelled vouchers
• pending_payments  Σ balance over pending + partial vouchers
• overdue_payments  # of open vouchers whose due date has passed
"""

from __future__ import annotations

from calendar import month_abbr
from datetime import date
from decimal import Decimal

from django.db.models import Count, DecimalField, ExpressionWrapper, F, Sum
from django.db.models.functions import Coalesce, ExtractMonth
from django.utils import timezone

from accounts.principal import Principal
from apps.clients.models import Client
from apps.corecode.money import ZERO, _r2

from .models import Voucher, VoucherPayment
from .status import OPEN_STATUSES, VoucherStatus

# ── constants ──────────────────────────────────────────────────────
DECIMAL: DecimalField = DecimalField(max_digits=16, decimal_places=2)
BALANCE = ExpressionWrapper(F("amount") - F("amount_paid"), output_field=DECIMAL)


def _year_map() -> dict[int, Decimal]:
    """Return {1:0, …, 12:0} filled with `Decimal` zeros."""
    return {m: Decimal("0") for m in range(1, 13)}


def _sum(qs, expr) -> Decimal:
    return _r2(qs.aggregate(t=Coalesce(Sum(expr), ZERO, output_field=DECIMAL))["t"])


# ══════════════════════════════════════════════════════════════════
#  Main façade
# ══════════════════════════════════════════════════════════════════
class VoucherLedger:
    """
    Aggregates the vouchers visible to *principal*.

    Owners may narrow to one campus with *campus_id*; accountants and
    client logins are already narrowed by their principal and the
    argument is ignored for them.
    """

    # ── construction ────────────────────────────────────────────
    def __init__(
        self,
        principal: Principal,
        *,
        campus_id: int | None = None,
        client_id: int | None = None,
        year: int | None = None,
        today: date | None = None,
    ) -> None:
        self.principal = principal
        self.today = today or timezone.localdate()
        self.year = year or self.today.year

        vouchers = principal.scope_vouchers(Voucher.objects.all())
        clients = principal.scope_clients(Client.objects.all())
        if campus_id and principal.is_owner:
            vouchers = vouchers.filter(campus_id=campus_id)
            clients = clients.filter(campus_id=campus_id)
        if client_id:
            vouchers = vouchers.filter(client_id=client_id)
            clients = clients.filter(pk=client_id)
        self.vouchers = vouchers
        self.clients = clients

        self.month_collected = _year_map()   # Σ payments by payment_date
        self.by_status: dict[str, dict[str, Decimal | int]] = {}

        self._load()

    # ── data loader (private) ───────────────────────────────────
    def _load(self) -> None:
        live = self.vouchers.filter(cancelled_at__isnull=True)
        open_ = self.vouchers.filter(status__in=OPEN_STATUSES)

        self.total_clients = self.clients.count()
        self.total_billed = _sum(live, "amount")
        self.total_revenue = _sum(live, "amount_paid")
        self.pending_payments = _sum(open_, BALANCE)
        self.overdue_payments = open_.filter(due_date__lt=self.today).count()
        self.overdue_amount = _sum(open_.filter(due_date__lt=self.today), BALANCE)

        # 1⃣ per status
        for row in (
            self.vouchers.values("status")
            .annotate(
                n=Count("id"),
                amt=Coalesce(Sum("amount"), ZERO, output_field=DECIMAL),
                paid=Coalesce(Sum("amount_paid"), ZERO, output_field=DECIMAL),
            )
            .order_by("status")
        ):
            self.by_status[row["status"]] = {
                "count": row["n"], "amount": _r2(row["amt"]), "amount_paid": _r2(row["paid"]),
            }

        # 2⃣ collections per month
        for row in (
            VoucherPayment.objects.filter(voucher__in=self.vouchers, payment_date__year=self.year)
            .annotate(m=ExtractMonth("payment_date"))
            .values("m")
            .annotate(v=Coalesce(Sum("amount"), ZERO, output_field=DECIMAL))
            .order_by("m")
        ):
            self.month_collected[row["m"]] = _r2(row["v"])

    # ── helpers for charts / JSON ───────────────────────────────
    @property
    def chart_data(self) -> list[dict]:
        """[{name: 'Paid', value: Σ amount}, …] in status order."""
        return [
            {"name": s.label, "status": s.value, "value": self.by_status[s.value]["amount"],
             "count": self.by_status[s.value]["count"]}
            for s in VoucherStatus
            if s.value in self.by_status
        ]

    @property
    def chart_labels(self) -> list[str]:
        return [month_abbr[m] for m in range(1, 13)]

    def as_dict(self) -> dict:
        return {
            "total_clients": self.total_clients,
            "total_billed": self.total_billed,
            "total_revenue": self.total_revenue,
            "pending_payments": self.pending_payments,
            "overdue_payments": self.overdue_payments,
            "overdue_amount": self.overdue_amount,
            "chart_data": self.chart_data,
            "collections": {
                "year": self.year,
                "labels": self.chart_labels,
                "values": [self.month_collected[m] for m in range(1, 13)],
            },
        }


class ClientLedger:
    """Contract figures for one client (what the director portal shows)."""

    def __init__(self, principal: Principal, client: Client, *, today: date | None = None) -> None:
        principal.ensure_can_view(campus_id=client.campus_id, client_id=client.pk)
        self.client = Client.objects.with_totals().get(pk=client.pk)
        self.vouchers = VoucherLedger(principal, client_id=client.pk, today=today)

    @property
    def total_amount(self) -> Decimal:
        return _r2(self.client.total_amount)

    @property
    def total_paid(self) -> Decimal:
        return _r2(self.client.total_paid)

    @property
    def outstanding(self) -> Decimal:
        return _r2(self.client.outstanding)

    def as_dict(self) -> dict:
        return {
            "client_id": self.client.pk,
            "client_name": self.client.name,
            "total_amount": self.total_amount,
            "total_paid": self.total_paid,
            "pending_amount": self.outstanding,
            "contract_value": self.client.contract_value,
            "total_seats": self.client.total_seats,
            "overdue_payments": self.vouchers.overdue_payments,
            "chart_data": self.vouchers.chart_data,
        }
