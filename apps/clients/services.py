# apps/clients/services.py
"""
Client onboarding and maintenance.

A client, its programs and its milestone plan are created in one
transaction: either all rows land or none do.
"""

from __future__ import annotations

import logging

from django.conf import settings
from django.core.exceptions import PermissionDenied, ValidationError
from django.db import transaction
from django.utils.dateparse import parse_date

from accounts.principal import Principal
from apps.corecode.models import Campus
from apps.corecode.money import to_id, to_money

from .models import Client, PaymentPlan, Program

logger = logging.getLogger(__name__)

CLIENT_FIELDS = ("name", "director_name", "city")


# ────────────────────────────────────────────────────────────────────
# input cleaning (no writes)
# ────────────────────────────────────────────────────────────────────
def _text(data: dict, key: str) -> str:
    return str(data.get(key) or "").strip()


def _seat_count(value, field: str = "seat_count") -> int:
    try:
        seats = int(str(value))
    except (TypeError, ValueError):
        raise ValidationError({field: "seat_count must be greater than 0 for all programs."})
    if seats <= 0:
        raise ValidationError({field: "seat_count must be greater than 0 for all programs."})
    return seats


def _clean_programs(rows) -> list[dict]:
    if not isinstance(rows, (list, tuple)) or not rows:
        raise ValidationError({"programs": "At least one program is required."})
    cleaned = []
    for row in rows:
        if not isinstance(row, dict):
            raise ValidationError({"programs": "Each program must be an object."})
        name = _text(row, "program_name")
        if not name:
            raise ValidationError({"programs": "program_name is required for all programs."})
        cleaned.append({"program_name": name, "seat_count": _seat_count(row.get("seat_count"))})
    return cleaned


def _clean_plan(rows) -> list[dict]:
    if not rows:
        rows = settings.DEFAULT_PAYMENT_PLAN
    if not isinstance(rows, (list, tuple)):
        raise ValidationError({"payment_plan": "payment_plan must be a list."})
    cleaned = []
    for idx, row in enumerate(rows, start=1):
        if not isinstance(row, dict):
            raise ValidationError({"payment_plan": "Each milestone must be an object."})
        try:
            display_order = int(row.get("display_order") or idx)
        except (TypeError, ValueError):
            raise ValidationError({"payment_plan": "display_order must be a whole number."})
        payment_type = _text(row, "payment_type")
        if not payment_type:
            raise ValidationError({"payment_plan": "payment_type is required for every milestone."})
        due = row.get("due_date")
        due_date = parse_date(str(due)) if due else None
        if due and due_date is None:
            raise ValidationError({"payment_plan": f"Invalid due_date '{due}'."})
        cleaned.append({
            "payment_type": payment_type,
            "amount": to_money(row.get("amount"), "payment_plan"),
            "due_date": due_date,
            "display_order": display_order,
        })
    return cleaned


def _campus_for(principal: Principal, data: dict) -> int:
    """Accountants always onboard into their own campus; owners must pick one."""
    if principal.is_accountant:
        if not principal.campus_id:
            raise ValidationError("Accountant has no campus assigned. Contact admin.")
        return principal.campus_id
    if not principal.is_owner:
        raise PermissionDenied("Client logins are read-only.")
    campus_id = to_id(data.get("campus_id"), "campus_id")
    if not Campus.objects.filter(pk=campus_id).exists():
        raise ValidationError({"campus_id": f"Campus {campus_id} does not exist."})
    return campus_id


# ════════════════════════════════════════════════════════════════════
# 1.  Onboarding
# ════════════════════════════════════════════════════════════════════
def onboard_client(principal: Principal, data: dict) -> Client:
    name = _text(data, "name")
    if not name or data.get("seat_cost") in (None, ""):
        raise ValidationError("name and seat_cost are required.")
    seat_cost = to_money(data.get("seat_cost"), "seat_cost")
    programs = _clean_programs(data.get("programs"))
    plan = _clean_plan(data.get("payment_plan"))
    campus_id = _campus_for(principal, data)

    with transaction.atomic():
        client = Client.objects.create(
            name=name,
            director_name=_text(data, "director_name"),
            city=_text(data, "city"),
            campus_id=campus_id,
            seat_cost=seat_cost,
        )
        Program.objects.bulk_create([Program(client=client, **p) for p in programs])
        PaymentPlan.objects.bulk_create([PaymentPlan(client=client, **m) for m in plan])
        # bulk_create skips signals
        client.refresh_total_seats()

    logger.info(
        "Client %s onboarded on campus %s by %s (%d program(s), %d milestone(s), %d seats)",
        client.pk, campus_id, principal.name, len(programs), len(plan), client.total_seats,
    )
    return client


# ════════════════════════════════════════════════════════════════════
# 2.  Updates / delete
# ════════════════════════════════════════════════════════════════════
def _writable_client(principal: Principal, client_id, *, lock: bool = False) -> Client:
    qs = Client.objects.select_for_update() if lock else Client.objects
    client = qs.get(pk=client_id)
    principal.ensure_can_write(campus_id=client.campus_id, client_id=client.pk)
    return client


def update_client(principal: Principal, client_id, data: dict) -> Client:
    with transaction.atomic():
        client = _writable_client(principal, client_id, lock=True)
        changed = []
        for key in CLIENT_FIELDS:
            if key in data:
                value = _text(data, key)
                if key == "name" and not value:
                    raise ValidationError({"name": "name cannot be blank."})
                setattr(client, key, value)
                changed.append(key)
        if "seat_cost" in data:
            client.seat_cost = to_money(data["seat_cost"], "seat_cost")
            changed.append("seat_cost")
        campus_id = to_id(data["campus_id"], "campus_id") if data.get("campus_id") else client.campus_id
        if campus_id != client.campus_id:
            if not principal.is_owner:
                raise PermissionDenied("Only owners can move a client to another campus.")
            campus = Campus.objects.get(pk=campus_id)
            client.campus = campus
            changed.append("campus")
            # vouchers follow their client
            client.vouchers.update(campus=campus)
        if changed:
            client.save(update_fields=[*changed, "updated_at"])

    logger.info("Client %s updated by %s (%s)", client.pk, principal.name, ", ".join(changed) or "no changes")
    return client


def delete_client(principal: Principal, client_id) -> None:
    with transaction.atomic():
        client = _writable_client(principal, client_id)
        name = client.name
        client.delete()
    logger.info("Client %s (%s) deleted by %s", client_id, name, principal.name)


# ════════════════════════════════════════════════════════════════════
# 3.  Programs
# ════════════════════════════════════════════════════════════════════
def add_program(principal: Principal, client_id, data: dict) -> Program:
    (row,) = _clean_programs([data])
    with transaction.atomic():
        client = _writable_client(principal, client_id)
        program = Program.objects.create(client=client, **row)
    logger.info("Program %s added to client %s by %s", program.pk, client.pk, principal.name)
    return program


def update_program(principal: Principal, client_id, program_id, data: dict) -> Program:
    with transaction.atomic():
        client = _writable_client(principal, client_id)
        program = client.programs.get(pk=program_id)
        if "program_name" in data:
            name = _text(data, "program_name")
            if not name:
                raise ValidationError({"program_name": "program_name is required."})
            program.program_name = name
        if "seat_count" in data:
            program.seat_count = _seat_count(data["seat_count"])
        program.save()
    logger.info("Program %s of client %s updated by %s", program.pk, client.pk, principal.name)
    return program


def delete_program(principal: Principal, client_id, program_id) -> None:
    with transaction.atomic():
        client = _writable_client(principal, client_id, lock=True)
        program = client.programs.get(pk=program_id)
        if client.programs.count() <= 1:
            raise ValidationError("A client must keep at least one program.")
        program.delete()
    logger.info("Program %s removed from client %s by %s", program_id, client.pk, principal.name)
