# apps/finance/views.py
"""
Voucher API
───────────
/api/vouchers                               GET list · POST manual create
/api/vouchers/generate                      POST from milestone
/api/vouchers/<id>                          GET detail · DELETE
/api/vouchers/<id>/status                   PATCH {status}
/api/vouchers/<id>/record-payment           POST | PATCH
/api/vouchers/<id>/cancel                   PATCH | POST
/api/vouchers/<id>/payments                 GET
/api/vouchers/<id>/payments/<payment_id>    PUT
/api/vouchers/<id>/pdf                      GET (attachment)
"""

from __future__ import annotations

import logging

from django.http import HttpResponse
from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from accounts.permissions import IsStaffRoleOrReadOnly
from accounts.principal import PrincipalMixin
from apps.corecode.pagination import envelope

from . import services
from .filters import VoucherFilter
from .models import Voucher
from .serializers import VoucherDetailSerializer, VoucherPaymentSerializer, VoucherSerializer
from .utils import _render_pdf, voucher_pdf_context

logger = logging.getLogger(__name__)


class VoucherViewSet(PrincipalMixin,
                     mixins.ListModelMixin,
                     mixins.RetrieveModelMixin,
                     viewsets.GenericViewSet):
    serializer_class = VoucherSerializer
    permission_classes = [IsStaffRoleOrReadOnly]
    pagination_class = envelope("vouchers")
    filterset_class = VoucherFilter
    lookup_value_regex = r"\d+"

    def get_queryset(self):
        qs = Voucher.objects.select_related("client", "campus", "payment_plan", "generated_by")
        return self.principal.scope_vouchers(qs).order_by("-created_at", "-id")

    def get_object(self) -> Voucher:
        # out-of-scope rows are 403, not 404
        voucher = (
            Voucher.objects.select_related("client", "campus", "payment_plan", "generated_by")
            .get(pk=self.kwargs["pk"])
        )
        self.principal.ensure_can_view(campus_id=voucher.campus_id, client_id=voucher.client_id)
        return voucher

    def get_serializer_class(self):
        if self.action == "retrieve":
            return VoucherDetailSerializer
        return super().get_serializer_class()

    def _voucher_response(self, voucher: Voucher, *, message: str | None = None, code=status.HTTP_200_OK, **extra):
        voucher.refresh_from_db()
        body = {"voucher": VoucherDetailSerializer(voucher).data, **extra}
        if message:
            body["message"] = message
        return Response(body, status=code)

    # ── create ──────────────────────────────────────────────────
    def create(self, request, *args, **kwargs):
        d = request.data
        voucher = services.create_manual_voucher(
            self.principal,
            d.get("client_id"),
            d.get("amount"),
            label=d.get("label") or d.get("description") or "",
            due_date=d.get("due_date"),
            amount_paid=d.get("amount_paid"),
            payment_method=d.get("payment_method"),
        )
        return self._voucher_response(voucher, message="Voucher created", code=status.HTTP_201_CREATED)

    @action(detail=False, methods=["post"])
    def generate(self, request):
        d = request.data
        voucher = services.generate_from_milestone(
            self.principal, d.get("client_id"), d.get("payment_plan_id"), due_date=d.get("due_date"),
        )
        return self._voucher_response(voucher, message="Voucher generated", code=status.HTTP_201_CREATED)

    # ── state changes ───────────────────────────────────────────
    @action(detail=True, methods=["patch"], url_path="status")
    def set_status(self, request, pk=None):
        voucher = services.set_status(
            self.principal, pk, request.data.get("status"),
            payment_method=request.data.get("payment_method"),
        )
        return self._voucher_response(voucher, message=f"Voucher marked {voucher.status}")

    @action(detail=True, methods=["post", "patch"], url_path="record-payment")
    def record_payment(self, request, pk=None):
        d = request.data
        voucher, payment = services.record_payment(
            self.principal,
            pk,
            # older clients send the increment as amount_paid
            d.get("payment_amount") or d.get("amount_paid") or d.get("amount"),
            payment_method=d.get("payment_method"),
            payment_date=d.get("payment_date"),
            notes=d.get("notes", ""),
        )
        return self._voucher_response(
            voucher, message="Payment recorded", payment=VoucherPaymentSerializer(payment).data,
        )

    @action(detail=True, methods=["patch", "post"])
    def cancel(self, request, pk=None):
        voucher = services.cancel_voucher(self.principal, pk)
        return self._voucher_response(voucher, message="Voucher cancelled")

    def destroy(self, request, pk=None):
        services.delete_voucher(self.principal, pk)
        return Response({"message": "Voucher deleted"})

    # ── payments ────────────────────────────────────────────────
    @action(detail=True, methods=["get"])
    def payments(self, request, pk=None):
        voucher = self.get_object()
        rows = voucher.payments.select_related("recorded_by")
        return Response({"voucher_id": voucher.pk, "payments": VoucherPaymentSerializer(rows, many=True).data})

    @action(detail=True, methods=["put", "patch"], url_path=r"payments/(?P<payment_id>\d+)")
    def edit_payment(self, request, pk=None, payment_id=None):
        voucher, payment = services.edit_payment(self.principal, pk, payment_id, request.data)
        return self._voucher_response(
            voucher, message="Payment updated", payment=VoucherPaymentSerializer(payment).data,
        )

    # ── PDF ─────────────────────────────────────────────────────
    @action(detail=True, methods=["get"])
    def pdf(self, request, pk=None):
        voucher = self.get_object()
        pdf_bytes = _render_pdf("finance/voucher_pdf.html", voucher_pdf_context(voucher))
        if not pdf_bytes:
            return Response({"error": "PDF generation failed."}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

        resp = HttpResponse(pdf_bytes, content_type="application/pdf")
        resp["Content-Disposition"] = f"attachment; filename={voucher.voucher_number}.pdf"
        return resp
