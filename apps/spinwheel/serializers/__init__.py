"""
Spin wheel serializers module.

All serializers are exported from this module to maintain backward compatibility.
"""
from .wheel_serializers import SpinSegmentSerializer, SpinWheelSerializer, SpinResultSerializer

__all__ = [
    'SpinSegmentSerializer',
    'SpinWheelSerializer',
    'SpinResultSerializer',
]
