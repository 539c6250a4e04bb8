import django.db.models.deletion
import django.utils.timezone
from decimal import Decimal
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("clients", "0001_initial"),
        ("corecode", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Voucher",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("voucher_number", models.CharField(blank=True, max_length=60, unique=True)),
                ("label", models.CharField(blank=True, max_length=200)),
                ("amount", models.DecimalField(decimal_places=2, max_digits=14)),
                ("amount_paid", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=14)),
                ("status", models.CharField(choices=[("pending", "Pending"), ("partial", "Partially paid"), ("paid", "Paid"), ("cancelled", "Cancelled")], default="pending", editable=False, max_length=10)),
                ("due_date", models.DateField(blank=True, null=True)),
                ("cancelled_at", models.DateTimeField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("campus", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="vouchers", to="corecode.campus")),
                ("client", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="vouchers", to="clients.client")),
                ("generated_by", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="generated_vouchers", to=settings.AUTH_USER_MODEL)),
                ("payment_plan", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="vouchers", to="clients.paymentplan")),
            ],
            options={
                "ordering": ["-created_at", "-id"],
                "indexes": [
                    models.Index(fields=["campus", "status"], name="voucher_campus_status_idx"),
                    models.Index(fields=["client", "status"], name="voucher_client_status_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(condition=models.Q(("amount__gt", 0)), name="voucher_amount_positive"),
                    models.CheckConstraint(condition=models.Q(("amount_paid__gte", 0)), name="voucher_paid_nonneg"),
                    models.CheckConstraint(condition=models.Q(("amount_paid__lte", models.F("amount"))), name="voucher_paid_within_amount"),
                    models.UniqueConstraint(condition=models.Q(("cancelled_at__isnull", True), ("payment_plan__isnull", False)), fields=("payment_plan",), name="one_live_voucher_per_milestone"),
                ],
            },
        ),
        migrations.CreateModel(
            name="VoucherPayment",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("amount", models.DecimalField(decimal_places=2, max_digits=14)),
                ("payment_date", models.DateField(default=django.utils.timezone.localdate)),
                ("payment_method", models.CharField(default="Cash", max_length=50)),
                ("notes", models.TextField(blank=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("recorded_by", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="recorded_payments", to=settings.AUTH_USER_MODEL)),
                ("voucher", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="payments", to="finance.voucher")),
            ],
            options={
                "ordering": ["payment_date", "id"],
                "constraints": [
                    models.CheckConstraint(condition=models.Q(("amount__gt", 0)), name="voucher_payment_positive"),
                ],
            },
        ),
    ]
