# apps/finance/signals.py
from __future__ import annotations

import logging

from django.db.models.signals import post_delete, post_save
from django.dispatch import receiver

from .models import Voucher, VoucherPayment

logger = logging.getLogger(__name__)


# ════════════════════════════════════════════════════════════════════════
# 1.  Voucher-creation hook
# ════════════════════════════════════════════════════════════════════════
@receiver(post_save, sender=Voucher, dispatch_uid="voucher_created_log")
def after_creating_voucher(sender, instance: Voucher, created: bool, **kwargs) -> None:
    if not created:
        return
    logger.debug(
        "Voucher %s saved for client %s (amount %s, milestone %s)",
        instance.voucher_number, instance.client_id, instance.amount, instance.payment_plan_id,
    )


# ════════════════════════════════════════════════════════════════════════
# 2.  Payment rows removed outside the services (admin, shell)
#    • rebuild the parent voucher's amount_paid + status
# ════════════════════════════════════════════════════════════════════════
@receiver(post_delete, sender=VoucherPayment, dispatch_uid="payment_deleted_resync")
def _resync_after_payment_delete(sender, instance: VoucherPayment, **_):
    from .services import sync_voucher

    # None while the voucher itself is being cascade-deleted
    voucher = Voucher.objects.filter(pk=instance.voucher_id).first()
    if voucher is None:
        return
    if sync_voucher(voucher):
        logger.info("Voucher %s re-synced after payment %s was deleted", voucher.voucher_number, instance.pk)
