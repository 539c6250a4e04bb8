# apps/finance/management/commands/seed_demo.py
import logging
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand
from django.db import transaction

from accounts.models import Role
from apps.clients.models import Client, PaymentPlan, Program
from apps.corecode.models import Campus
from apps.finance.allocation import allocate_received
from apps.finance.models import Voucher, VoucherPayment

logger = logging.getLogger(__name__)

CAMPUSES = [
    ("Main Campus", "Lahore"),
    ("City Campus", "Lahore"),
    ("FSD College", "Faisalabad"),
]

MILESTONE_TYPES = ("advance", "pre_reg", "exam", "roll_slip")

# director, students, seat cost, amount received, per-student milestones, campus index
SCHOOLS = [
    ("Adeel",  15, Decimal("115000"),    Decimal("267000"), (20000, 10000, 10000, 10000), 0),
    ("Jameel", 26, Decimal("115384.62"), Decimal("918000"), (30000, 10000, 10000, 10000), 0),
    ("Haroon",  2, Decimal("105000"),    Decimal("60000"),  (30000, 10000, 10000, 10000), 1),
    ("Raffy",  16, Decimal("105000"),    Decimal("270000"), (30000, 10000, 10000, 10000), 2),
]


class Command(BaseCommand):
    help = "Load demo campuses, an accountant and four schools with milestone vouchers"

    def add_arguments(self, parser):
        parser.add_argument("--password", default="pass123", help="Password for every seeded login")

    @transaction.atomic
    def handle(self, *args, **opts):
        User = get_user_model()
        password = opts["password"]

        campuses = [
            Campus.objects.get_or_create(name=name, defaults={"city": city})[0]
            for name, city in CAMPUSES
        ]

        if not User.objects.filter(username="accountant@stepschool.edu").exists():
            User.objects.create_user(
                "accountant@stepschool.edu", password,
                full_name="Main Accountant", email="accountant@stepschool.edu",
                role=Role.ACCOUNTANT, campus=campuses[0],
            )

        created = 0
        for director, students, seat_cost, received, per_student, campus_idx in SCHOOLS:
            name = f"Step School ({director})"
            if Client.objects.filter(name=name).exists():
                self.stdout.write(f"{name} already present, skipped")
                continue

            campus = campuses[campus_idx]
            client = Client.objects.create(
                name=name, director_name=director, city=campus.city,
                campus=campus, seat_cost=seat_cost,
            )
            Program.objects.create(client=client, program_name="General Program", seat_count=students)

            amounts = [Decimal(amt) * students for amt in per_student]
            shares = allocate_received(received, amounts)
            for i, (ptype, amount, share) in enumerate(zip(MILESTONE_TYPES, amounts, shares), start=1):
                milestone = PaymentPlan.objects.create(
                    client=client, payment_type=ptype, amount=amount, display_order=i,
                )
                voucher = Voucher.objects.create(
                    voucher_number=f"VOC-{director.upper()}-{i}",
                    client=client, campus=campus, payment_plan=milestone,
                    amount=amount, amount_paid=share,
                )
                if share > 0:
                    VoucherPayment.objects.create(
                        voucher=voucher, amount=share, notes="Opening balance (seed)",
                    )

            email = f"{director.lower()}@school.edu"
            if not User.objects.filter(username=email).exists():
                User.objects.create_user(
                    email, password,
                    full_name=director, email=email, role=Role.CLIENT, client=client,
                )
            created += 1
            logger.info("Seeded %s (%s students, received %s)", name, students, received)

        self.stdout.write(self.style.SUCCESS(f"Seeded {created} school(s)"))
