from django.apps import AppConfig


class CorecodeConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.corecode"
    label = "corecode"
    verbose_name = "Campuses"
