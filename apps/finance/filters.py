# apps/finance/filters.py
import django_filters
from django.db.models import Q
from django.utils import timezone

from .models import Voucher
from .status import OPEN_STATUSES, VoucherStatus


class VoucherFilter(django_filters.FilterSet):
    """?status=&client_id=&campus_id=&search=&overdue=&manual="""
    status    = django_filters.ChoiceFilter(choices=VoucherStatus.choices)
    client_id = django_filters.NumberFilter(field_name="client_id")
    campus_id = django_filters.NumberFilter(field_name="campus_id")
    search    = django_filters.CharFilter(method="filter_search")
    overdue   = django_filters.BooleanFilter(method="filter_overdue")
    manual    = django_filters.BooleanFilter(field_name="payment_plan", lookup_expr="isnull")
    due_from  = django_filters.DateFilter(field_name="due_date", lookup_expr="gte")
    due_to    = django_filters.DateFilter(field_name="due_date", lookup_expr="lte")

    class Meta:
        model = Voucher
        fields = ["status", "client_id", "campus_id"]

    def filter_search(self, qs, name, value):
        value = value.strip()
        if not value:
            return qs
        return qs.filter(
            Q(voucher_number__icontains=value)
            | Q(client__name__icontains=value)
            | Q(label__icontains=value)
        )

    def filter_overdue(self, qs, name, value):
        if value is None:
            return qs
        past_due = Q(status__in=OPEN_STATUSES, due_date__lt=timezone.localdate())
        return qs.filter(past_due) if value else qs.exclude(past_due)
