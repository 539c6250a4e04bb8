"""
finance/utils.py
Shared helpers (PDF rendering, …) for the Finance app.
"""

from __future__ import annotations

import logging
from io import BytesIO

from django.template.loader import get_template
from django.utils import timezone
from xhtml2pdf import pisa

from .models import Voucher

logger = logging.getLogger(__name__)


def _render_pdf(template_path: str, context: dict[str, object]) -> bytes | None:
    """
    Render *template_path* with *context* and return the resulting PDF bytes.
    Returns **None** if generation fails (caller can handle the 500).
    """

    html = get_template(template_path).render(context)

    try:
        buf = BytesIO()
        result = pisa.CreatePDF(src=html, dest=buf, encoding="utf-8")
        if result.err:
            logger.error("xhtml2pdf reported %s error(s) for %s", result.err, template_path)
            return None
        return buf.getvalue()
    except Exception as exc:
        logger.exception("PDF generation failed: %s", exc)
        return None


def voucher_pdf_context(voucher: Voucher) -> dict[str, object]:
    """The fields a printed voucher needs, nothing else."""
    return {
        "voucher_number": voucher.voucher_number,
        "client_name": voucher.client.name,
        "campus_name": str(voucher.campus),
        "description": voucher.description,
        "amount": voucher.amount,
        "amount_paid": voucher.amount_paid,
        "balance": voucher.balance,
        "status": voucher.status,
        "due_date": voucher.due_date,
        "payments": list(voucher.payments.all()),
        "generated_at": timezone.localtime(),
    }
