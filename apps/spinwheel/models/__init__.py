"""
Spin wheel models module.

All models are exported from this module to maintain backward compatibility.
"""
from .wheel import SpinWheel, SpinSegment, MAX_TOTAL_PROBABILITY
from .result import SpinResult

__all__ = [
    'SpinWheel',
    'SpinSegment',
    'SpinResult',
    'MAX_TOTAL_PROBABILITY',
]
