"""
Role-based DRF permission classes.
"""

from rest_framework.permissions import BasePermission


class IsPlatformAdmin(BasePermission):
    """Admins and sub-admins."""

    message = 'Admin access required.'

    def has_permission(self, request, view):
        user = request.user
        return bool(user and user.is_authenticated and user.is_platform_admin)


class IsPartner(BasePermission):
    message = 'Partner access required.'

    def has_permission(self, request, view):
        user = request.user
        return bool(user and user.is_authenticated and user.is_partner)


class IsAdminOrSeller(BasePermission):
    message = 'Admin or seller access required.'

    def has_permission(self, request, view):
        user = request.user
        return bool(user and user.is_authenticated and (user.is_platform_admin or user.is_seller))


def HasAdminPermission(permission):
    """
    Build a permission class requiring a named admin permission.

    Full admins (no permission list) pass every check; sub-admins need
    permission in their list.

    Usage:
        permission_classes = [HasAdminPermission('managePartners')]
    """

    class _HasAdminPermission(BasePermission):
        message = f"Admin permission '{permission}' required."

        def has_permission(self, request, view):
            user = request.user
            return bool(user and user.is_authenticated and user.has_admin_permission(permission))

    _HasAdminPermission.__name__ = f"HasAdminPermission_{permission}"
    return _HasAdminPermission
