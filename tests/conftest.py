from datetime import timedelta

import pytest
from django.utils import timezone
from rest_framework.test import APIClient

from accounts.models import CustomUser, Role
from accounts.principal import Principal
from apps.corecode.models import Campus
from tests.factories import make_client, make_voucher


# ─── places ────────────────────────────────────────────────────────────
@pytest.fixture
def campus(db):
    return Campus.objects.create(name="Main Campus", city="Lahore")


@pytest.fixture
def other_campus(db):
    return Campus.objects.create(name="FSD College", city="Faisalabad")


# ─── clients ───────────────────────────────────────────────────────────
@pytest.fixture
def school(campus):
    return make_client(
        campus,
        plan=[("advance", "300000"), ("after_pre_registration", "150000"),
              ("submitted_examination", "150000"), ("roll_number_slip", "150000")],
    )


@pytest.fixture
def other_school(other_campus):
    return make_client(other_campus, name="Step School (Raffy)", seats=16, seat_cost="105000")


@pytest.fixture
def voucher(school):
    return make_voucher(school, "1000", "800", label="Books")


# ─── people ────────────────────────────────────────────────────────────
@pytest.fixture
def owner(db):
    return CustomUser.objects.create_user("owner", "pw", full_name="Owner", role=Role.OWNER)


@pytest.fixture
def accountant(campus):
    return CustomUser.objects.create_user("acc", "pw", full_name="Main Accountant",
                                          role=Role.ACCOUNTANT, campus=campus)


@pytest.fixture
def other_accountant(other_campus):
    return CustomUser.objects.create_user("acc2", "pw", role=Role.ACCOUNTANT, campus=other_campus)


@pytest.fixture
def director(school):
    return CustomUser.objects.create_user("adeel", "pw", full_name="Adeel",
                                          role=Role.CLIENT, client=school)


@pytest.fixture
def acc_principal(accountant):
    return Principal.from_user(accountant)


@pytest.fixture
def owner_principal(owner):
    return Principal.from_user(owner)


# ─── HTTP ──────────────────────────────────────────────────────────────
@pytest.fixture
def api():
    def _as(user=None):
        c = APIClient()
        if user is not None:
            c.force_authenticate(user=user)
        return c
    return _as


@pytest.fixture
def yesterday():
    return timezone.localdate() - timedelta(days=1)
