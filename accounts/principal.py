# accounts/principal.py
"""
Request-scoped principal.

Views build one ``Principal`` from ``request.user`` and hand it to every
service / ledger call, so scoping (campus for accountants, own record for
clients) is an explicit argument instead of ambient session state.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import cached_property

from django.core.exceptions import PermissionDenied
from django.db.models import QuerySet

from .models import Role


@dataclass(frozen=True)
class Principal:
    role: str
    campus_id: int | None = None
    client_id: int | None = None
    user_id: int | None = None
    name: str = ""

    # ── construction ────────────────────────────────────────────
    @classmethod
    def from_user(cls, user) -> "Principal":
        role = Role.OWNER if user.is_superuser else user.role
        return cls(
            role=role,
            campus_id=user.campus_id,
            client_id=user.client_id,
            user_id=user.pk,
            name=user.full_name or user.username,
        )

    @classmethod
    def system(cls, name: str = "System") -> "Principal":
        """Owner-level principal for management commands."""
        return cls(role=Role.OWNER, name=name)

    # ── role checks ─────────────────────────────────────────────
    @property
    def is_owner(self) -> bool:
        return self.role == Role.OWNER

    @property
    def is_accountant(self) -> bool:
        return self.role == Role.ACCOUNTANT

    @property
    def is_client(self) -> bool:
        return self.role == Role.CLIENT

    @property
    def can_write(self) -> bool:
        return self.role in (Role.OWNER, Role.ACCOUNTANT)

    # ── queryset scoping ────────────────────────────────────────
    def scope_clients(self, qs: QuerySet) -> QuerySet:
        if self.is_owner:
            return qs
        if self.is_accountant:
            return qs.filter(campus_id=self.campus_id)
        return qs.filter(pk=self.client_id)

    def scope_vouchers(self, qs: QuerySet) -> QuerySet:
        if self.is_owner:
            return qs
        if self.is_accountant:
            return qs.filter(campus_id=self.campus_id)
        return qs.filter(client_id=self.client_id)

    # ── object checks ───────────────────────────────────────────
    def can_view(self, *, campus_id: int | None, client_id: int | None) -> bool:
        if self.is_owner:
            return True
        if self.is_accountant:
            return campus_id is not None and campus_id == self.campus_id
        return client_id is not None and client_id == self.client_id

    def ensure_can_view(self, *, campus_id: int | None, client_id: int | None) -> None:
        if not self.can_view(campus_id=campus_id, client_id=client_id):
            raise PermissionDenied("Access denied")

    def ensure_can_write(self, *, campus_id: int | None, client_id: int | None = None) -> None:
        if not self.can_write:
            raise PermissionDenied("Client logins are read-only.")
        self.ensure_can_view(campus_id=campus_id, client_id=client_id)


class PrincipalMixin:
    """For DRF views: ``self.principal`` built once per request."""

    @cached_property
    def principal(self) -> Principal:
        return Principal.from_user(self.request.user)
