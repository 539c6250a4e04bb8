from django.db import models


# -------------------------
# Campuses
# -------------------------

class Campus(models.Model):
    """Regional operating unit (e.g., Main Campus, Lahore)."""
    name = models.CharField(max_length=200, unique=True)
    city = models.CharField(max_length=120, blank=True)
    location = models.CharField(max_length=255, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["name"]
        verbose_name = "Campus"
        verbose_name_plural = "Campuses"

    def __str__(self) -> str:
        return f"{self.name} ({self.city})" if self.city else self.name
