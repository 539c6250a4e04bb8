from django.contrib import admin

from .models import Voucher, VoucherPayment


class VoucherPaymentInline(admin.TabularInline):
    model = VoucherPayment
    extra = 0
    fields = ("amount", "payment_date", "payment_method", "notes", "recorded_by")


@admin.register(Voucher)
class VoucherAdmin(admin.ModelAdmin):
    list_display = ("voucher_number", "client", "campus", "amount", "amount_paid", "status", "due_date")
    list_filter = ("status", "campus")
    search_fields = ("voucher_number", "client__name", "label")
    readonly_fields = ("status", "amount_paid", "cancelled_at", "created_at", "updated_at")
    inlines = [VoucherPaymentInline]


@admin.register(VoucherPayment)
class VoucherPaymentAdmin(admin.ModelAdmin):
    list_display = ("voucher", "amount", "payment_date", "payment_method", "recorded_by")
    list_filter = ("payment_method",)
    search_fields = ("voucher__voucher_number",)
