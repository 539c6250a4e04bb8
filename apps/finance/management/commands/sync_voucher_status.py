import logging

from django.core.management.base import BaseCommand
from django.db import transaction

from apps.finance.models import Voucher
from apps.finance.services import sync_voucher

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    help = "Rebuilds amount_paid from payment rows and re-derives status for all vouchers"

    def add_arguments(self, parser):
        parser.add_argument("--campus", type=int, help="Only vouchers of this campus id")

    def handle(self, *args, **opts):
        vouchers = Voucher.objects.order_by("id")
        if opts.get("campus"):
            vouchers = vouchers.filter(campus_id=opts["campus"])

        total_updated = 0
        for voucher in vouchers.iterator():
            with transaction.atomic():
                if sync_voucher(voucher):
                    total_updated += 1
                    logger.info("Synced voucher %s → %s / %s", voucher.voucher_number, voucher.amount_paid, voucher.status)
        self.stdout.write(self.style.SUCCESS(f"Updated {total_updated} vouchers"))
