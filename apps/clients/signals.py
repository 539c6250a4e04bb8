# apps/clients/signals.py
from __future__ import annotations

import logging

from django.db.models import Sum
from django.db.models.signals import post_delete, post_save
from django.dispatch import receiver

from .models import Client, Program

logger = logging.getLogger(__name__)


# ════════════════════════════════════════════════════════════════════════
# Program rows → Client.total_seats snapshot
#    fires for services, admin edits and scripts alike
# ════════════════════════════════════════════════════════════════════════
@receiver([post_save, post_delete], sender=Program, dispatch_uid="refresh_client_total_seats")
def _refresh_client_seats(sender, instance: Program, **_):
    seats = Program.objects.filter(client_id=instance.client_id).aggregate(t=Sum("seat_count"))["t"] or 0
    # .update() is a no-op while the client itself is being cascade-deleted
    changed = Client.objects.filter(pk=instance.client_id).exclude(total_seats=seats).update(total_seats=seats)
    if changed:
        logger.debug("Client %s total_seats → %s", instance.client_id, seats)
