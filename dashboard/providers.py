# dashboard/providers.py
"""KPI cards; imported once from DashboardConfig.ready()."""
from .metrics import register


@register
def clients_card(ledger):
    return {"key": "total_clients", "title": "Clients", "value": ledger.total_clients}


@register
def revenue_card(ledger):
    return {
        "key": "total_revenue",
        "title": "Collected",
        "value": ledger.total_revenue,
        "detail": {"billed": ledger.total_billed},
    }


@register
def pending_card(ledger):
    return {"key": "pending_payments", "title": "Pending", "value": ledger.pending_payments}


@register
def overdue_card(ledger):
    return {
        "key": "overdue_payments",
        "title": "Overdue vouchers",
        "value": ledger.overdue_payments,
        "detail": {"amount": ledger.overdue_amount},
    }
