from decimal import Decimal

import pytest

from tests.factories import make_voucher

pytestmark = pytest.mark.django_db


@pytest.fixture
def books(school, other_school):
    make_voucher(school, "1000", "400", label="Books")
    make_voucher(other_school, "2000", "2000", label="Kits")


def _card(body, key):
    return next(c for c in body["cards"] if c["key"] == key)


def test_accountant_metrics_are_campus_scoped(api, accountant, books):
    body = api(accountant).get("/api/dashboard/metrics").json()

    assert body["total_clients"] == 1
    assert Decimal(str(body["total_revenue"])) == Decimal("400")
    assert Decimal(str(body["pending_payments"])) == Decimal("600")
    assert _card(body, "total_clients")["value"] == 1
    assert len(body["collections"]["values"]) == 12


def test_owner_sees_all_or_one_campus(api, owner, books, other_campus):
    everything = api(owner).get("/api/dashboard/metrics").json()
    assert everything["total_clients"] == 2
    assert Decimal(str(everything["total_revenue"])) == Decimal("2400")

    one = api(owner).get("/api/dashboard/metrics", {"campus_id": other_campus.pk}).json()
    assert Decimal(str(one["total_revenue"])) == Decimal("2000")


def test_bad_query_param_is_400(api, owner):
    assert api(owner).get("/api/dashboard/metrics", {"year": "soon"}).status_code == 400


def test_director_client_metrics(api, director, school, books):
    body = api(director).get("/api/dashboard/client-metrics").json()

    assert body["client_id"] == school.pk
    assert body["total_seats"] == 15
    assert Decimal(str(body["total_paid"])) == Decimal("400")
    # plan 750000 + manual 1000 − paid 400
    assert Decimal(str(body["pending_amount"])) == Decimal("750600")


def test_staff_client_metrics_need_client_id(api, accountant, school, other_school):
    c = api(accountant)
    assert c.get("/api/dashboard/client-metrics").status_code == 400
    assert c.get("/api/dashboard/client-metrics", {"client_id": school.pk}).status_code == 200
    assert c.get("/api/dashboard/client-metrics", {"client_id": other_school.pk}).status_code == 403
