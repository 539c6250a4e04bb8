# apps/finance/templatetags/finance_tags.py
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

from django import template
from django.conf import settings
from django.utils.safestring import mark_safe

register = template.Library()


# ───────────────────────────────────────────────────────────────
#  Money
# ───────────────────────────────────────────────────────────────
@register.filter(name="dec")
def dec(value):
    """
    Format with thousands-commas.  Show decimals ONLY when the number really
    has paisas, e.g. 83 750  → “83,750”   •   83 750.4  → “83,750.40”
    """
    try:
        val = Decimal(value)
        if val == val.to_integral_value():         # whole number → no dp
            return "{:,}".format(int(val))
        return "{:,.2f}".format(val.quantize(Decimal("0.01"), ROUND_HALF_UP))
    except (InvalidOperation, ValueError, TypeError):
        return value


@register.filter(name="pkr")
def pkr(value):
    """{{ voucher.amount|pkr }} → “PKR 115,000”"""
    if value is None or value == "":
        return f"{settings.FEE_CURRENCY} 0"
    return f"{settings.FEE_CURRENCY} {dec(value)}"


@register.filter(name="percent")
def as_percent(value, total):
    """
    Return *value / total × 100*, formatted with 0 decimal places.

    {{ paid|percent:amount }} → "43"
    """
    try:
        return int(round(float(value) / float(total) * 100))
    except (TypeError, ValueError, ZeroDivisionError):
        return 0


# ───────────────────────────────────────────────────────────────
#  Misc. helpers
# ───────────────────────────────────────────────────────────────
STATUS_HUE = {"paid": "#198754", "partial": "#fd7e14", "pending": "#0d6efd", "cancelled": "#6c757d"}


@register.simple_tag
def badge(status):
    """
    Coloured pill for voucher statuses.

    {% badge voucher.status %}
    """
    hue = STATUS_HUE.get(str(status), "#6c757d")
    return mark_safe(
        f'<span style="color:#fff;background:{hue};padding:2px 6px;">{str(status).upper()}</span>'
    )
