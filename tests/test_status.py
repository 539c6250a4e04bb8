from decimal import Decimal

import pytest

from apps.finance.status import VoucherStatus, derive_status

D = Decimal


@pytest.mark.parametrize(
    "amount, paid, cancelled, expected",
    [
        (D("1000"), D("0"), False, VoucherStatus.PENDING),
        (D("1000"), D("0.01"), False, VoucherStatus.PARTIAL),
        (D("1000"), D("999.99"), False, VoucherStatus.PARTIAL),
        (D("1000"), D("1000"), False, VoucherStatus.PAID),
        (D("1000"), D("0"), True, VoucherStatus.CANCELLED),
        (D("1000"), D("1000"), True, VoucherStatus.CANCELLED),
        (D("1000"), D("500"), True, VoucherStatus.CANCELLED),
    ],
)
def test_precedence(amount, paid, cancelled, expected):
    assert derive_status(amount, paid, cancelled) == expected


def test_deterministic():
    args = (D("2500"), D("1200"), False)
    assert {derive_status(*args) for _ in range(5)} == {VoucherStatus.PARTIAL}


@pytest.mark.django_db
def test_stored_status_follows_amounts(school):
    from tests.factories import make_voucher

    v = make_voucher(school, "1000")
    assert v.status == VoucherStatus.PENDING
    v.amount_paid = Decimal("400")
    v.save()
    assert v.status == VoucherStatus.PARTIAL
    v.amount_paid = Decimal("1000")
    v.save(update_fields=["amount_paid"])
    v.refresh_from_db()
    assert v.status == VoucherStatus.PAID
