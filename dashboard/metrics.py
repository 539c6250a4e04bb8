# dashboard/metrics.py
"""
Collect KPI dictionaries for the dashboard endpoint.

Each provider receives the request's ``VoucherLedger`` and returns:
    {"key": str, "title": str, "value": Any,             # mandatory
     "detail": Any | None}                                # optional
"""
import logging
from typing import Callable, Dict, List

logger = logging.getLogger(__name__)

_PROVIDERS: list[Callable[..., Dict]] = []


def register(fn: Callable[..., Dict]):
    """Decorator – add function to the providers stack."""
    _PROVIDERS.append(fn)
    return fn        # so you can still unit-test the function


def gather(ledger) -> List[Dict]:
    """Return a list of KPI dicts – providers that raise are logged and skipped."""
    cards: list[Dict] = []
    for fn in _PROVIDERS:
        try:
            card = fn(ledger)
        except Exception:
            logger.exception("KPI provider %s failed", fn.__name__)
            continue
        if card:
            cards.append(card)
    return cards
