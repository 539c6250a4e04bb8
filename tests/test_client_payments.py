from decimal import Decimal

import pytest
from django.core.exceptions import ValidationError

from apps.finance import services
from apps.finance.models import VoucherPayment
from apps.finance.status import VoucherStatus
from tests.factories import make_client

D = Decimal

pytestmark = pytest.mark.django_db


@pytest.fixture
def adeel(campus):
    per_student = [20000, 10000, 10000, 10000]
    return make_client(
        campus,
        plan=[(t, str(a * 15)) for t, a in zip(["advance", "pre_reg", "exam", "roll_slip"], per_student)],
    )


@pytest.fixture
def adeel_vouchers(adeel, acc_principal):
    return [
        services.generate_from_milestone(acc_principal, adeel.pk, m.pk)
        for m in adeel.payment_plan.order_by("display_order")
    ]


def test_lump_sum_follows_milestone_order(adeel, adeel_vouchers, acc_principal):
    applied = services.record_client_payment(acc_principal, adeel.pk, "267000", payment_method="Bank")

    assert len(applied) == 1
    rows = [v for v in adeel.vouchers.order_by("payment_plan__display_order")]
    for v in rows:
        v.refresh_from_db()
    assert [v.amount_paid for v in rows] == [D("267000"), D("0"), D("0"), D("0")]
    assert [v.status for v in rows] == [
        VoucherStatus.PARTIAL, VoucherStatus.PENDING, VoucherStatus.PENDING, VoucherStatus.PENDING,
    ]


def test_lump_sum_spills_over(adeel, adeel_vouchers, acc_principal):
    applied = services.record_client_payment(acc_principal, adeel.pk, "350000")

    assert [p.amount for _, p in applied] == [D("300000"), D("50000")]
    assert applied[0][0].status == VoucherStatus.PAID
    assert applied[1][0].status == VoucherStatus.PARTIAL


def test_lump_sum_above_open_balance_rejected(adeel, adeel_vouchers, acc_principal):
    with pytest.raises(ValidationError):
        services.record_client_payment(acc_principal, adeel.pk, "750000.01")
    assert not VoucherPayment.objects.exists()


def test_client_balance_counts_plan_and_payments(adeel, adeel_vouchers, acc_principal):
    services.record_client_payment(acc_principal, adeel.pk, "267000")
    assert services.client_balance(adeel) == D("750000") - D("267000")
