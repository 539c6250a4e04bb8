from rest_framework.permissions import SAFE_METHODS, BasePermission

from .principal import Principal


class IsOwner(BasePermission):
    """Campus writes are owner-only; everyone signed in may read."""
    message = "Only owners can manage campuses."

    def has_permission(self, request, view):
        if not (request.user and request.user.is_authenticated):
            return False
        if request.method in SAFE_METHODS:
            return True
        return Principal.from_user(request.user).is_owner


class IsStaffRoleOrReadOnly(BasePermission):
    """Owners and accountants write; client logins only read."""
    message = "Access denied"

    def has_permission(self, request, view):
        if not (request.user and request.user.is_authenticated):
            return False
        if request.method in SAFE_METHODS:
            return True
        return Principal.from_user(request.user).can_write
