from datetime import timedelta
from decimal import Decimal

import pytest
from django.utils import timezone

from accounts.principal import Principal
from apps.clients.models import Client
from apps.finance import services
from apps.finance.ledger import ClientLedger, VoucherLedger
from tests.factories import make_client, make_voucher

D = Decimal

pytestmark = pytest.mark.django_db


@pytest.fixture
def three_vouchers(campus):
    client = make_client(campus, name="Step School (Haroon)", seats=2, seat_cost="105000")
    vouchers = [
        make_voucher(client, "1000", "1000"),
        make_voucher(client, "2000", "500"),
        make_voucher(client, "3000", "0"),
    ]
    return client, vouchers


def test_outstanding_and_pending_agree(three_vouchers, acc_principal):
    client, _ = three_vouchers

    ledger = VoucherLedger(acc_principal)
    row = Client.objects.with_totals().get(pk=client.pk)

    assert row.total_amount == D("6000")
    assert row.total_paid == D("1500")
    assert row.outstanding == D("4500")
    assert ledger.pending_payments == D("4500")
    assert ledger.total_revenue == D("1500")
    assert ledger.total_billed == D("6000")
    assert ledger.total_clients == 1


def test_cancelled_vouchers_leave_revenue_and_pending(three_vouchers, acc_principal):
    _, (_, partial, pending) = three_vouchers
    services.cancel_voucher(acc_principal, pending.pk)

    ledger = VoucherLedger(acc_principal)

    assert ledger.pending_payments == D("1500")
    assert ledger.total_revenue == D("1500")
    assert ledger.by_status["cancelled"]["count"] == 1


def test_overdue_counts_open_vouchers_past_due(campus, acc_principal):
    client = make_client(campus)
    past = timezone.localdate() - timedelta(days=3)
    make_voucher(client, "100", due_date=past)
    make_voucher(client, "100", "40", due_date=past)
    make_voucher(client, "100", "100", due_date=past)
    make_voucher(client, "100", due_date=timezone.localdate() + timedelta(days=3))
    cancelled = make_voucher(client, "100", due_date=past)
    services.cancel_voucher(acc_principal, cancelled.pk)

    ledger = VoucherLedger(acc_principal)

    assert ledger.overdue_payments == 2
    assert ledger.overdue_amount == D("160")


def test_accountant_only_sees_own_campus(school, other_school, accountant, owner):
    make_voucher(school, "1000", "100")
    make_voucher(other_school, "5000", "2500")

    mine = VoucherLedger(Principal.from_user(accountant))
    everything = VoucherLedger(Principal.from_user(owner))
    one_campus = VoucherLedger(Principal.from_user(owner), campus_id=other_school.campus_id)

    assert mine.total_revenue == D("100")
    assert mine.total_clients == 1
    assert everything.total_revenue == D("2600")
    assert everything.total_clients == 2
    assert one_campus.total_revenue == D("2500")


def test_monthly_collections(school, acc_principal):
    v = make_voucher(school, "1000")
    services.record_payment(acc_principal, v.pk, "300", payment_date="2025-02-10")
    services.record_payment(acc_principal, v.pk, "200", payment_date="2025-02-20")
    services.record_payment(acc_principal, v.pk, "100", payment_date="2025-05-01")

    ledger = VoucherLedger(acc_principal, year=2025)

    assert ledger.month_collected[2] == D("500")
    assert ledger.month_collected[5] == D("100")
    assert ledger.as_dict()["collections"]["labels"][1] == "Feb"


def test_client_ledger_reports_contract_value(school, director):
    make_voucher(school, "1000", "250")

    data = ClientLedger(Principal.from_user(director), school).as_dict()

    # four milestones (750000) plus the manual voucher
    assert data["total_amount"] == D("751000")
    assert data["total_paid"] == D("250")
    assert data["pending_amount"] == D("750750")
    assert data["contract_value"] == D("15") * D("115000")
    assert data["total_seats"] == 15
