"""
User serializers module.

All serializers are exported from this module to maintain backward compatibility.
"""
from .user_serializers import (
    UserListSerializer, UserDetailSerializer,
    UserRegistrationSerializer, UserUpdateSerializer
)

__all__ = [
    'UserListSerializer',
    'UserDetailSerializer',
    'UserRegistrationSerializer',
    'UserUpdateSerializer',
]
