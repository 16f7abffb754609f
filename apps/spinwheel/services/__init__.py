"""
Spin wheel services module.

All services are exported from this module to maintain backward compatibility.
"""
from .resolver import SpinWheelResolver
from .spin_service import SpinService

__all__ = [
    'SpinWheelResolver',
    'SpinService',
]
