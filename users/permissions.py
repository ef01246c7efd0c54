from rest_framework import permissions
from users.models import User


class HasRole(permissions.BasePermission):
    """Grants access to authenticated callers whose role is in `roles`."""

    roles = ()
    message = 'Forbidden'

    def has_permission(self, request, view):
        return (
            request.user and
            request.user.is_authenticated and
            request.user.role in self.roles
        )


class IsAdmin(HasRole):
    """Only Admin users have access"""
    roles = (User.Role.ADMIN,)


class IsNormalUser(HasRole):
    """Only normal (rating) users have access"""
    roles = (User.Role.USER,)


class IsStoreOwner(HasRole):
    """Only Store Owners have access"""
    roles = (User.Role.STORE_OWNER,)
