"""
Shared DRF permission classes
"""
from rest_framework.permissions import BasePermission


class IsAdminRole(BasePermission):
    """Allow staff users and users whose role is admin"""
    message = 'Admin access required'

    def has_permission(self, request, view):
        user = request.user
        if not user or not user.is_authenticated:
            return False
        return bool(user.is_staff or getattr(user, 'role', None) == 'admin')
