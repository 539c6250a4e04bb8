from django.contrib import admin

from .models import Client, PaymentPlan, Program


class ProgramInline(admin.TabularInline):
    model = Program
    extra = 0


class PaymentPlanInline(admin.TabularInline):
    model = PaymentPlan
    extra = 0


@admin.register(Client)
class ClientAdmin(admin.ModelAdmin):
    list_display = ("name", "director_name", "city", "campus", "seat_cost", "total_seats")
    list_filter = ("campus",)
    search_fields = ("name", "director_name", "city")
    readonly_fields = ("total_seats",)
    inlines = [ProgramInline, PaymentPlanInline]
