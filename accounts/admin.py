from django.contrib import admin

from .models import CustomUser


@admin.register(CustomUser)
class CustomUserAdmin(admin.ModelAdmin):
    list_display = ("username", "full_name", "role", "campus", "client", "is_active")
    list_filter = ("role", "campus", "is_active")
    search_fields = ("username", "full_name", "email")
    exclude = ("password",)
