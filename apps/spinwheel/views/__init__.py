"""
Spin wheel views module.

All views are exported from this module to maintain backward compatibility.
"""
from .admin_views import SpinWheelAdminViewSet

__all__ = [
    'SpinWheelAdminViewSet',
]
