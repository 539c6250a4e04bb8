from rest_framework import serializers

from .models import Voucher, VoucherPayment


class VoucherPaymentSerializer(serializers.ModelSerializer):
    voucher_id = serializers.IntegerField(read_only=True)
    recorded_by = serializers.StringRelatedField(read_only=True)

    class Meta:
        model = VoucherPayment
        fields = [
            "id", "voucher_id", "amount", "payment_date", "payment_method",
            "notes", "recorded_by", "created_at",
        ]


class VoucherSerializer(serializers.ModelSerializer):
    client_id       = serializers.IntegerField(read_only=True)
    client_name     = serializers.CharField(source="client.name", read_only=True)
    campus_id       = serializers.IntegerField(read_only=True)
    payment_plan_id = serializers.IntegerField(read_only=True, allow_null=True)
    payment_type    = serializers.CharField(source="payment_plan.payment_type", default=None, read_only=True)
    description     = serializers.CharField(read_only=True)
    balance         = serializers.DecimalField(max_digits=14, decimal_places=2, read_only=True)
    is_overdue      = serializers.SerializerMethodField()
    generated_by    = serializers.StringRelatedField(read_only=True)

    class Meta:
        model = Voucher
        fields = [
            "id", "voucher_number", "client_id", "client_name", "campus_id",
            "payment_plan_id", "payment_type", "label", "description",
            "amount", "amount_paid", "balance", "status", "is_overdue",
            "due_date", "cancelled_at", "generated_by", "created_at",
        ]
        read_only_fields = fields

    def get_is_overdue(self, obj) -> bool:
        return obj.is_overdue()


class VoucherDetailSerializer(VoucherSerializer):
    payments = VoucherPaymentSerializer(many=True, read_only=True)

    class Meta(VoucherSerializer.Meta):
        fields = VoucherSerializer.Meta.fields + ["payments"]
        read_only_fields = fields
