from decimal import Decimal

import pytest
from django.core.exceptions import ValidationError
from django.utils import timezone

from apps.corecode.exceptions import ConflictError
from apps.finance import services
from apps.finance.models import Voucher
from apps.finance.status import VoucherStatus

D = Decimal

pytestmark = pytest.mark.django_db


def test_milestone_voucher_copies_amount(school, acc_principal):
    milestone = school.payment_plan.get(display_order=1)

    v = services.generate_from_milestone(acc_principal, school.pk, milestone.pk)

    assert v.amount == milestone.amount
    assert v.payment_plan_id == milestone.pk
    assert v.campus_id == school.campus_id
    assert v.status == VoucherStatus.PENDING
    assert v.generated_by_id == acc_principal.user_id


def test_second_live_voucher_for_milestone_conflicts(school, acc_principal):
    milestone = school.payment_plan.first()
    first = services.generate_from_milestone(acc_principal, school.pk, milestone.pk)

    with pytest.raises(ConflictError) as exc:
        services.generate_from_milestone(acc_principal, school.pk, milestone.pk)

    assert exc.value.extra["voucher_number"] == first.voucher_number
    assert Voucher.objects.filter(payment_plan=milestone).count() == 1


def test_cancelled_milestone_voucher_can_be_reissued(school, acc_principal):
    milestone = school.payment_plan.first()
    first = services.generate_from_milestone(acc_principal, school.pk, milestone.pk)
    services.cancel_voucher(acc_principal, first.pk)

    second = services.generate_from_milestone(acc_principal, school.pk, milestone.pk)

    assert second.pk != first.pk
    assert second.voucher_number != first.voucher_number


def test_milestone_of_another_client_is_not_found(school, other_school, owner_principal):
    from apps.clients.models import PaymentPlan

    foreign = PaymentPlan.objects.create(client=other_school, payment_type="advance", amount=D("5000"))
    with pytest.raises(PaymentPlan.DoesNotExist):
        services.generate_from_milestone(owner_principal, school.pk, foreign.pk)


def test_voucher_numbers_run_per_campus_and_year(school, acc_principal):
    year = timezone.localdate().year
    a = services.create_manual_voucher(acc_principal, school.pk, "100")
    b = services.create_manual_voucher(acc_principal, school.pk, "200")

    assert a.voucher_number == f"VOC-{school.campus_id}-{year}-0001"
    assert b.voucher_number == f"VOC-{school.campus_id}-{year}-0002"


def test_manual_voucher_with_initial_payment(school, acc_principal):
    v = services.create_manual_voucher(
        acc_principal, school.pk, "5000",
        label="Late registration", due_date="2025-06-30",
        amount_paid="1500", payment_method="Bank",
    )
    v.refresh_from_db()

    assert v.payment_plan_id is None
    assert v.is_manual
    assert v.description == "Late registration"
    assert v.amount_paid == D("1500")
    assert v.status == VoucherStatus.PARTIAL
    assert v.payments.get().payment_method == "Bank"


def test_manual_voucher_initial_payment_above_amount(school, acc_principal):
    with pytest.raises(ValidationError):
        services.create_manual_voucher(acc_principal, school.pk, "100", amount_paid="101")
    assert not Voucher.objects.exists()


def test_manual_voucher_needs_positive_amount(school, acc_principal):
    with pytest.raises(ValidationError):
        services.create_manual_voucher(acc_principal, school.pk, "0")


def test_delete_voucher(voucher, acc_principal):
    services.delete_voucher(acc_principal, voucher.pk)
    assert not Voucher.objects.filter(pk=voucher.pk).exists()
