from rest_framework import serializers

from apps.finance.models import Voucher, VoucherPayment
from apps.finance.serializers import VoucherSerializer

from .models import Client, PaymentPlan, Program

MONEY = dict(max_digits=14, decimal_places=2, read_only=True)


class ProgramSerializer(serializers.ModelSerializer):
    class Meta:
        model = Program
        fields = ["id", "program_name", "seat_count", "created_at"]


class PaymentPlanSerializer(serializers.ModelSerializer):
    label = serializers.CharField(read_only=True)
    voucher = serializers.SerializerMethodField()

    class Meta:
        model = PaymentPlan
        fields = ["id", "payment_type", "label", "amount", "due_date", "display_order", "voucher"]

    def get_voucher(self, obj):
        """The live voucher issued for this milestone, if any."""
        live = [v for v in obj.vouchers.all() if v.cancelled_at is None]
        if not live:
            return None
        v = live[0]
        return {"id": v.pk, "voucher_number": v.voucher_number, "status": v.status,
                "amount_paid": v.amount_paid, "balance": v.balance}


class PaymentHistorySerializer(serializers.ModelSerializer):
    voucher_id = serializers.IntegerField(read_only=True)
    voucher_number = serializers.CharField(source="voucher.voucher_number", read_only=True)
    recorded_by = serializers.StringRelatedField(read_only=True)

    class Meta:
        model = VoucherPayment
        fields = [
            "id", "voucher_id", "voucher_number", "amount", "payment_date",
            "payment_method", "notes", "recorded_by",
        ]


class ClientSerializer(serializers.ModelSerializer):
    """List row; expects a queryset from ``Client.objects.with_totals()``."""
    campus_id      = serializers.IntegerField(read_only=True)
    campus_name    = serializers.CharField(source="campus.name", read_only=True)
    total_amount   = serializers.DecimalField(**MONEY)
    total_paid     = serializers.DecimalField(**MONEY)
    outstanding    = serializers.DecimalField(**MONEY)
    contract_value = serializers.DecimalField(**MONEY)

    class Meta:
        model = Client
        fields = [
            "id", "name", "director_name", "city", "campus_id", "campus_name",
            "seat_cost", "total_seats", "total_amount", "total_paid",
            "outstanding", "contract_value", "created_at",
        ]
        read_only_fields = fields


class ClientDetailSerializer(ClientSerializer):
    programs           = ProgramSerializer(many=True, read_only=True)
    payment_plan       = serializers.SerializerMethodField()
    milestone_vouchers = serializers.SerializerMethodField()
    manual_vouchers    = serializers.SerializerMethodField()
    payment_history    = serializers.SerializerMethodField()

    class Meta(ClientSerializer.Meta):
        fields = ClientSerializer.Meta.fields + [
            "programs", "payment_plan", "milestone_vouchers", "manual_vouchers", "payment_history",
        ]
        read_only_fields = fields

    def get_payment_plan(self, obj):
        plan = obj.payment_plan.prefetch_related("vouchers")
        return PaymentPlanSerializer(plan, many=True).data

    def _vouchers(self, obj):
        return Voucher.objects.filter(client=obj).select_related("client", "payment_plan", "generated_by")

    def get_milestone_vouchers(self, obj):
        qs = self._vouchers(obj).filter(payment_plan__isnull=False).order_by("payment_plan__display_order", "id")
        return VoucherSerializer(qs, many=True).data

    def get_manual_vouchers(self, obj):
        qs = self._vouchers(obj).filter(payment_plan__isnull=True).order_by("created_at", "id")
        return VoucherSerializer(qs, many=True).data

    def get_payment_history(self, obj):
        qs = (
            VoucherPayment.objects.filter(voucher__client=obj)
            .select_related("voucher", "recorded_by")
            .order_by("-payment_date", "-id")
        )
        return PaymentHistorySerializer(qs, many=True).data
