# apps/clients/views.py
"""
Client API
──────────
/api/clients                                  GET list (search/paging) · POST onboard
/api/clients/<id>                             GET detail · PUT/PATCH · DELETE
/api/clients/<id>/programs                    POST
/api/clients/<id>/programs/<program_id>       PUT · DELETE
/api/clients/<id>/record-payment              POST lump sum, spread over vouchers
"""

from __future__ import annotations

import logging

from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from accounts.permissions import IsStaffRoleOrReadOnly
from accounts.principal import PrincipalMixin
from apps.corecode.pagination import envelope
from apps.finance import services as finance_services
from apps.finance.serializers import VoucherPaymentSerializer

from . import services
from .filters import ClientFilter
from .models import Client
from .serializers import ClientDetailSerializer, ClientSerializer, ProgramSerializer

logger = logging.getLogger(__name__)


class ClientViewSet(PrincipalMixin, viewsets.GenericViewSet):
    serializer_class = ClientSerializer
    permission_classes = [IsStaffRoleOrReadOnly]
    pagination_class = envelope("clients")
    filterset_class = ClientFilter
    lookup_value_regex = r"\d+"

    def get_queryset(self):
        qs = Client.objects.with_totals().select_related("campus")
        return self.principal.scope_clients(qs).order_by("name", "id")

    def get_object(self) -> Client:
        # out-of-scope rows are 403, not 404
        client = Client.objects.with_totals().select_related("campus").get(pk=self.kwargs["pk"])
        self.principal.ensure_can_view(campus_id=client.campus_id, client_id=client.pk)
        return client

    def _detail(self, client_id, *, code=status.HTTP_200_OK, **extra) -> Response:
        client = Client.objects.with_totals().select_related("campus").get(pk=client_id)
        return Response({**ClientDetailSerializer(client).data, **extra}, status=code)

    # ── CRUD ────────────────────────────────────────────────────
    def list(self, request):
        qs = self.filter_queryset(self.get_queryset())
        page = self.paginate_queryset(qs)
        return self.get_paginated_response(self.get_serializer(page, many=True).data)

    def retrieve(self, request, pk=None):
        return Response(ClientDetailSerializer(self.get_object()).data)

    def create(self, request):
        client = services.onboard_client(self.principal, request.data)
        return self._detail(client.pk, code=status.HTTP_201_CREATED)

    def update(self, request, pk=None):
        client = services.update_client(self.principal, pk, request.data)
        return self._detail(client.pk)

    def partial_update(self, request, pk=None):
        return self.update(request, pk)

    def destroy(self, request, pk=None):
        services.delete_client(self.principal, pk)
        return Response({"message": "Client deleted successfully"})

    # ── programs ────────────────────────────────────────────────
    @action(detail=True, methods=["post"])
    def programs(self, request, pk=None):
        program = services.add_program(self.principal, pk, request.data)
        return Response(ProgramSerializer(program).data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=["put", "patch", "delete"], url_path=r"programs/(?P<program_id>\d+)")
    def program_detail(self, request, pk=None, program_id=None):
        if request.method == "DELETE":
            services.delete_program(self.principal, pk, program_id)
            return Response({"message": "Program deleted"})
        program = services.update_program(self.principal, pk, program_id, request.data)
        return Response(ProgramSerializer(program).data)

    # ── lump-sum payment ────────────────────────────────────────
    @action(detail=True, methods=["post"], url_path="record-payment")
    def record_payment(self, request, pk=None):
        d = request.data
        applied = finance_services.record_client_payment(
            self.principal,
            pk,
            d.get("amount"),
            payment_method=d.get("payment_method"),
            payment_date=d.get("payment_date"),
            notes=d.get("notes", ""),
        )
        return self._detail(
            pk,
            message=f"Payment spread over {len(applied)} voucher(s)",
            allocations=[
                {"voucher_id": v.pk, "voucher_number": v.voucher_number, "status": v.status,
                 "payment": VoucherPaymentSerializer(p).data}
                for v, p in applied
            ],
        )
