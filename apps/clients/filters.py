# apps/clients/filters.py
import django_filters
from django.db.models import Q

from .models import Client


class ClientFilter(django_filters.FilterSet):
    """?search=&campus_id=&city="""
    search    = django_filters.CharFilter(method="filter_search")
    campus_id = django_filters.NumberFilter(field_name="campus_id")
    city      = django_filters.CharFilter(field_name="city", lookup_expr="iexact")

    class Meta:
        model = Client
        fields = ["campus_id", "city"]

    def filter_search(self, qs, name, value):
        value = value.strip()
        if not value:
            return qs
        return qs.filter(
            Q(name__icontains=value) | Q(director_name__icontains=value) | Q(city__icontains=value)
        )
