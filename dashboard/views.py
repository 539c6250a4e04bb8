# dashboard/views.py
from __future__ import annotations

from django.core.exceptions import ValidationError
from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.principal import PrincipalMixin
from apps.clients.models import Client
from apps.finance.ledger import ClientLedger, VoucherLedger

from .metrics import gather


def _int_param(request, name: str) -> int | None:
    raw = request.query_params.get(name)
    if raw in (None, ""):
        return None
    try:
        return int(raw)
    except ValueError:
        raise ValidationError({name: f"{name} must be an integer."})


class MetricsView(PrincipalMixin, APIView):
    """
    GET /api/dashboard/metrics[?campus_id=&year=]

    Owners see every campus (or one, via ``campus_id``); accountants their
    campus; client logins their own vouchers.
    """

    def get(self, request):
        ledger = VoucherLedger(
            self.principal,
            campus_id=_int_param(request, "campus_id"),
            year=_int_param(request, "year"),
        )
        return Response({**ledger.as_dict(), "cards": gather(ledger)})


class ClientMetricsView(PrincipalMixin, APIView):
    """
    GET /api/dashboard/client-metrics[?client_id=]

    Client logins always get their own record; staff must name a client.
    """

    def get(self, request):
        p = self.principal
        client_id = p.client_id if p.is_client else _int_param(request, "client_id")
        if client_id is None:
            raise ValidationError({"client_id": "client_id is required."})
        client = Client.objects.get(pk=client_id)
        return Response(ClientLedger(p, client).as_dict())
