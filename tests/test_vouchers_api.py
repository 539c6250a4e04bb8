from decimal import Decimal
from unittest import mock

import pytest

from apps.finance.models import Voucher
from tests.factories import make_voucher

pytestmark = pytest.mark.django_db


def _milestone(school, order=1):
    return school.payment_plan.get(display_order=order)


# ─── create / generate ─────────────────────────────────────────────────
def test_manual_voucher_with_initial_payment(api, accountant, school):
    resp = api(accountant).post(
        "/api/vouchers",
        {"client_id": school.pk, "amount": "5000", "label": "Lab fee", "amount_paid": "2000"},
        format="json",
    )

    assert resp.status_code == 201
    v = resp.json()["voucher"]
    assert v["status"] == "partial"
    assert v["description"] == "Lab fee"
    assert v["voucher_number"].startswith(f"VOC-{school.campus_id}-")
    assert len(v["payments"]) == 1


def test_manual_voucher_needs_positive_amount(api, accountant, school):
    resp = api(accountant).post("/api/vouchers", {"client_id": school.pk, "amount": "0"}, format="json")
    assert resp.status_code == 400
    assert not Voucher.objects.exists()


def test_generate_then_conflict(api, accountant, school):
    c = api(accountant)
    payload = {"client_id": school.pk, "payment_plan_id": _milestone(school).pk, "due_date": "2025-02-01"}

    first = c.post("/api/vouchers/generate", payload, format="json")
    assert first.status_code == 201
    body = first.json()["voucher"]
    assert Decimal(str(body["amount"])) == Decimal("300000")
    assert body["due_date"] == "2025-02-01"

    again = c.post("/api/vouchers/generate", payload, format="json")
    assert again.status_code == 409
    assert again.json()["voucher_id"] == body["id"]


def test_generate_for_other_campus_is_forbidden(api, other_accountant, school):
    resp = api(other_accountant).post(
        "/api/vouchers/generate",
        {"client_id": school.pk, "payment_plan_id": _milestone(school).pk},
        format="json",
    )
    assert resp.status_code == 403


# ─── list / detail ─────────────────────────────────────────────────────
def test_list_filters(api, accountant, school, other_school):
    make_voucher(school, "1000", "1000", label="Books")
    make_voucher(school, "500", label="Transport")
    make_voucher(other_school, "700")
    c = api(accountant)

    body = c.get("/api/vouchers").json()
    assert body["pagination"]["total"] == 2
    assert {v["label"] for v in body["vouchers"]} == {"Books", "Transport"}

    paid = c.get("/api/vouchers", {"status": "paid"}).json()["vouchers"]
    assert [v["label"] for v in paid] == ["Books"]

    found = c.get("/api/vouchers", {"search": "transp"}).json()["vouchers"]
    assert [v["label"] for v in found] == ["Transport"]


def test_overdue_filter(api, accountant, school, yesterday):
    make_voucher(school, "100", label="Late", due_date=yesterday)
    make_voucher(school, "100", label="Open")
    rows = api(accountant).get("/api/vouchers", {"overdue": "true"}).json()["vouchers"]
    assert [v["label"] for v in rows] == ["Late"]
    assert rows[0]["is_overdue"] is True


def test_missing_voucher_is_404(api, accountant):
    resp = api(accountant).get("/api/vouchers/99999")
    assert resp.status_code == 404
    assert resp.json()["error"] == "Voucher not found."


def test_other_campus_voucher_is_403(api, other_accountant, voucher):
    assert api(other_accountant).get(f"/api/vouchers/{voucher.pk}").status_code == 403


def test_director_reads_but_cannot_write(api, director, voucher):
    c = api(director)
    assert c.get(f"/api/vouchers/{voucher.pk}").status_code == 200
    resp = c.post(f"/api/vouchers/{voucher.pk}/record-payment", {"payment_amount": "100"}, format="json")
    assert resp.status_code == 403


# ─── payments ──────────────────────────────────────────────────────────
def test_record_payment_overdraw_is_400(api, accountant, voucher):
    resp = api(accountant).post(f"/api/vouchers/{voucher.pk}/record-payment", {"payment_amount": "201"}, format="json")
    assert resp.status_code == 400
    voucher.refresh_from_db()
    assert voucher.amount_paid == Decimal("800")


def test_record_payment_settles(api, accountant, voucher):
    resp = api(accountant).patch(
        f"/api/vouchers/{voucher.pk}/record-payment",
        {"amount": "200", "payment_method": "Cheque"},
        format="json",
    )
    assert resp.status_code == 200
    body = resp.json()
    assert body["voucher"]["status"] == "paid"
    assert body["payment"]["payment_method"] == "Cheque"


def test_payments_list_and_edit(api, accountant, school):
    c = api(accountant)
    v = make_voucher(school, "1000")
    c.post(f"/api/vouchers/{v.pk}/record-payment", {"payment_amount": "300"}, format="json")

    listing = c.get(f"/api/vouchers/{v.pk}/payments").json()
    assert listing["voucher_id"] == v.pk
    (row,) = listing["payments"]

    resp = c.put(f"/api/vouchers/{v.pk}/payments/{row['id']}", {"amount": "1000"}, format="json")
    assert resp.status_code == 200
    assert resp.json()["voucher"]["status"] == "paid"

    too_much = c.put(f"/api/vouchers/{v.pk}/payments/{row['id']}", {"amount": "1001"}, format="json")
    assert too_much.status_code == 400


# ─── state changes ─────────────────────────────────────────────────────
def test_cancel(api, accountant, school):
    v = make_voucher(school, "400")
    resp = api(accountant).patch(f"/api/vouchers/{v.pk}/cancel")
    assert resp.status_code == 200
    assert resp.json()["voucher"]["status"] == "cancelled"
    assert api(accountant).patch(f"/api/vouchers/{v.pk}/cancel").status_code == 400


def test_status_patch(api, accountant, voucher):
    c = api(accountant)
    assert c.patch(f"/api/vouchers/{voucher.pk}/status", {"status": "pending"}, format="json").status_code == 400

    resp = c.patch(f"/api/vouchers/{voucher.pk}/status", {"status": "paid"}, format="json")
    assert resp.status_code == 200
    body = resp.json()["voucher"]
    assert body["status"] == "paid"
    assert Decimal(str(body["balance"])) == 0


def test_delete(api, accountant, voucher):
    assert api(accountant).delete(f"/api/vouchers/{voucher.pk}").status_code == 200
    assert not Voucher.objects.filter(pk=voucher.pk).exists()


# ─── pdf ───────────────────────────────────────────────────────────────
def test_pdf_download(api, accountant, voucher):
    with mock.patch("apps.finance.views._render_pdf", return_value=b"%PDF-1.4 test") as render:
        resp = api(accountant).get(f"/api/vouchers/{voucher.pk}/pdf")

    assert resp.status_code == 200
    assert resp["Content-Type"] == "application/pdf"
    assert resp["Content-Disposition"] == f"attachment; filename={voucher.voucher_number}.pdf"
    assert resp.content == b"%PDF-1.4 test"
    template, ctx = render.call_args.args
    assert template == "finance/voucher_pdf.html"


def test_pdf_failure_is_500(api, accountant, voucher):
    with mock.patch("apps.finance.views._render_pdf", return_value=None):
        resp = api(accountant).get(f"/api/vouchers/{voucher.pk}/pdf")
    assert resp.status_code == 500
    assert resp.json() == {"error": "PDF generation failed."}


def test_record_payment_accepts_amount_paid_key(api, accountant, voucher):
    resp = api(accountant).patch(
        f"/api/vouchers/{voucher.pk}/record-payment",
        {"amount_paid": "100", "payment_method": "Cash", "payment_date": "2025-03-01"},
        format="json",
    )

    assert resp.status_code == 200
    body = resp.json()
    assert Decimal(str(body["voucher"]["amount_paid"])) == Decimal("900")
    assert body["payment"]["payment_date"] == "2025-03-01"


# ─── malformed ids ─────────────────────────────────────────────────────
def test_generate_with_non_numeric_milestone_is_400(api, accountant, school):
    resp = api(accountant).post(
        "/api/vouchers/generate", {"client_id": school.pk, "payment_plan_id": "abc"}, format="json",
    )
    assert resp.status_code == 400
    assert "payment_plan_id" in resp.json()["details"]
    assert not Voucher.objects.exists()


def test_manual_voucher_with_non_numeric_client_is_400(api, accountant):
    resp = api(accountant).post("/api/vouchers", {"client_id": "abc", "amount": "100"}, format="json")
    assert resp.status_code == 400
    assert "client_id" in resp.json()["details"]


def test_non_numeric_voucher_path_is_404(api, accountant):
    assert api(accountant).get("/api/vouchers/abc").status_code == 404


def test_pdf_renders_for_real(api, accountant, voucher):
    resp = api(accountant).get(f"/api/vouchers/{voucher.pk}/pdf")

    assert resp.status_code == 200
    assert resp["Content-Type"] == "application/pdf"
    assert resp.content.startswith(b"%PDF")
