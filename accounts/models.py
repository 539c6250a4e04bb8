from django.contrib.auth.models import AbstractBaseUser, BaseUserManager, PermissionsMixin
from django.core.exceptions import ValidationError
from django.db import models


# ──────────────────────────────────────────────
# Roles
# ──────────────────────────────────────────────
class Role(models.TextChoices):
    OWNER      = "owner",      "Owner"
    ACCOUNTANT = "accountant", "Accountant"
    CLIENT     = "client",     "Client (school director)"


# ──────────────────────────────────────────────
# Custom User Manager
# ──────────────────────────────────────────────
class CustomUserManager(BaseUserManager):
    def create_user(self, username, password=None, **extra_fields):
        if not username:
            raise ValueError("The Username field must be set")
        user = self.model(username=username, **extra_fields)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_superuser(self, username, password=None, **extra_fields):
        extra_fields.setdefault("is_staff", True)
        extra_fields.setdefault("is_superuser", True)
        extra_fields.setdefault("role", Role.OWNER)
        return self.create_user(username, password, **extra_fields)


# ──────────────────────────────────────────────
# Base User
# ──────────────────────────────────────────────
class CustomUser(AbstractBaseUser, PermissionsMixin):
    """
    One login per person.  ``role`` decides what the principal may touch:

    • owner      – every campus
    • accountant – only ``campus``
    • client     – only ``client`` (read-only)
    """
    username  = models.CharField(max_length=150, unique=True)
    full_name = models.CharField(max_length=200, blank=True)
    email     = models.EmailField(blank=True)
    is_active = models.BooleanField(default=True)
    is_staff  = models.BooleanField(default=False)

    role   = models.CharField(max_length=20, choices=Role.choices, default=Role.ACCOUNTANT)
    campus = models.ForeignKey(
        "corecode.Campus",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="users",
    )
    client = models.ForeignKey(
        "clients.Client",
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="users",
    )

    date_joined = models.DateTimeField(auto_now_add=True)

    objects = CustomUserManager()

    USERNAME_FIELD = "username"

    class Meta:
        ordering = ["username"]

    def clean(self):
        super().clean()
        if self.role == Role.ACCOUNTANT and not self.campus_id:
            raise ValidationError({"campus": "Accountants must be assigned to a campus."})
        if self.role == Role.CLIENT and not self.client_id:
            raise ValidationError({"client": "Client logins must be linked to a client."})

    def __str__(self):
        return self.full_name or self.username
